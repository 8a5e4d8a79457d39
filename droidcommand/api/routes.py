"""API route definitions for DroidCommand framework."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..automation.action_executor import ActionExecutor
from ..automation.command_parser import CommandParser
from ..automation.session import COULD_NOT_UNDERSTAND, CommandSession
from ..automation.task_planner import TaskPlanner
from ..core.logger import log
from ..core.models import Failure, FailureKind, result_to_dict, step_to_dict
from ..providers import get_provider_source

# Create router instances
command_router = APIRouter()

# Global session instance
session_instance: Optional[CommandSession] = None


def create_session() -> CommandSession:
    """Build a session wired to the configured provider backend."""
    parser = CommandParser()
    planner = TaskPlanner(parser)
    executor = ActionExecutor(get_provider_source())
    return CommandSession(planner, executor)


def get_session() -> CommandSession:
    """Get or create the global command session."""
    global session_instance
    if session_instance is None:
        session_instance = create_session()
    return session_instance


def set_session(session: Optional[CommandSession]) -> None:
    """Replace the global command session."""
    global session_instance
    session_instance = session


# Pydantic models for request/response
class CommandRequest(BaseModel):
    """Request model for instructions."""
    command: str


class EntitiesResponse(BaseModel):
    """Response model for extracted entities."""
    app_name: Optional[str] = None
    package_name: Optional[str] = None
    contact_name: Optional[str] = None
    message_content: Optional[str] = None
    search_query: Optional[str] = None
    is_send_message: bool = False
    is_search: bool = False


class PlanResponse(BaseModel):
    """Response model for compiled plans."""
    command: str
    steps: List[Dict[str, Any]]


class ExecutionResponse(BaseModel):
    """Response model for executed instructions."""
    command: str
    result: Dict[str, Any]
    steps: List[Dict[str, Any]]


@command_router.post("/parse", response_model=EntitiesResponse)
async def parse_command(request: CommandRequest):
    """Extract entities from an instruction."""
    entities = get_session().planner.parser.parse(request.command)
    return EntitiesResponse(
        app_name=entities.app_name,
        package_name=entities.package_name,
        contact_name=entities.contact_name,
        message_content=entities.message_content,
        search_query=entities.search_query,
        is_send_message=entities.is_send_message,
        is_search=entities.is_search,
    )


@command_router.post("/plan", response_model=PlanResponse)
async def plan_command(request: CommandRequest):
    """Compile an instruction without executing it."""
    plan = get_session().planner.plan_task(request.command)
    if plan.is_empty:
        raise HTTPException(status_code=422, detail=COULD_NOT_UNDERSTAND)
    return PlanResponse(command=plan.command, steps=[step_to_dict(step) for step in plan])


@command_router.post("/execute", response_model=ExecutionResponse)
async def execute_command(request: CommandRequest):
    """Compile and execute an instruction."""
    session = get_session()
    result = await session.submit(request.command)
    if isinstance(result, Failure) and result.kind is FailureKind.UNRESOLVED:
        raise HTTPException(status_code=422, detail=result.error)

    log.info(f"Command finished: {result_to_dict(result)}")
    return ExecutionResponse(
        command=request.command,
        result=result_to_dict(result),
        steps=[execution.to_dict() for execution in session.executed_steps],
    )


@command_router.get("/status")
async def get_status():
    """Get the state of the current or last command."""
    session = get_session()
    return {
        "running": session.is_running,
        "state": session.state.to_dict(),
        "steps": [execution.to_dict() for execution in session.executed_steps],
    }


@command_router.post("/cancel")
async def cancel_command():
    """Cancel the running command at its next suspension point."""
    cancelled = get_session().cancel()
    return {"cancelled": cancelled}


@command_router.post("/reset")
async def reset_session():
    """Reset the session to idle; 409 while a command is running."""
    get_session().reset()
    return {"message": "Session reset"}

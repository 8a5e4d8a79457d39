"""Command line entry point for DroidCommand."""

from __future__ import annotations

import argparse
import asyncio
from typing import List, Optional

from .automation.action_executor import ActionExecutor
from .automation.session import COULD_NOT_UNDERSTAND, CommandSession
from .automation.task_planner import TaskPlanner
from .core.config import config
from .core.logger import log
from .core.models import ActionResult, Failure, FailureKind, Step
from .providers import get_provider_source
from .providers.adb import AdbProviderSource

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNRECOGNISED = 2


def _print_step(index: int, step: Step, result: Optional[ActionResult] = None) -> None:
    line = f"{index + 1:>2}. [{step.action.value}] {step.description}"
    if result is not None:
        status = "FAIL" if isinstance(result, Failure) else "OK"
        detail = result.error if isinstance(result, Failure) else ""
        line = f"{line} ... {status} {detail}".rstrip()
    print(line)


def cmd_plan(args: argparse.Namespace) -> int:
    """Print the compiled plan for an instruction."""
    plan = TaskPlanner().plan_task(args.instruction)
    if plan.is_empty:
        print(COULD_NOT_UNDERSTAND)
        return EXIT_UNRECOGNISED
    for index, step in enumerate(plan):
        _print_step(index, step)
    return EXIT_OK


def cmd_run(args: argparse.Namespace) -> int:
    """Compile and execute an instruction against a device."""
    source = AdbProviderSource(args.device) if args.device else get_provider_source()
    session = CommandSession(TaskPlanner(), ActionExecutor(source))

    result = asyncio.run(session.submit(args.instruction, on_step_complete=_print_step))
    if isinstance(result, Failure) and result.kind is FailureKind.UNRESOLVED:
        print(result.error)
        return EXIT_UNRECOGNISED
    if isinstance(result, Failure):
        print(f"Failed: {result.error}")
        return EXIT_FAILED
    print(result.message)
    return EXIT_OK


def cmd_serve(args: argparse.Namespace) -> int:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from .api.app import create_app

    log.info(f"Serving API on {args.host}:{args.port}")
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="droidcommand",
        description="Turn free-text instructions into Android UI automation",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    plan_parser = sub.add_parser("plan", help="Show the steps compiled for an instruction")
    plan_parser.add_argument("instruction", help='e.g. "Open WhatsApp and send message to Crazy"')
    plan_parser.set_defaults(func=cmd_plan)

    run_parser = sub.add_parser("run", help="Compile and execute an instruction on a device")
    run_parser.add_argument("instruction")
    run_parser.add_argument("--device", "-d", default=None, help="Device serial (default: auto-detect)")
    run_parser.set_defaults(func=cmd_run)

    serve_parser = sub.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=config.api_host)
    serve_parser.add_argument("--port", type=int, default=config.api_port)
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and dispatch to a sub-command."""
    args = build_parser().parse_args(argv)
    config.validate_config()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())

"""FastAPI application factory for DroidCommand framework."""

from __future__ import annotations

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..automation.session import CommandSession
from ..core.config import config
from ..core.errors import SessionBusyError
from ..core.logger import log
from .routes import command_router, get_session, set_session


def create_app(session: Optional[CommandSession] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session: Session to serve. A session wired to the configured
            provider backend is created lazily when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="DroidCommand API",
        description="Instruction-driven Android UI automation API",
        version=__version__,
    )

    if session is not None:
        set_session(session)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
        return response

    @app.exception_handler(SessionBusyError)
    async def session_busy(request: Request, exc: SessionBusyError):
        log.warning(f"Rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    app.include_router(command_router, prefix="/api/v1/commands", tags=["commands"])

    @app.get("/health")
    async def health_check():
        """Report service version, provider backend and whether a command is running."""
        return {
            "status": "healthy",
            "version": __version__,
            "provider_backend": config.provider_backend,
            "running": get_session().is_running,
        }

    log.info(f"API ready, provider backend {config.provider_backend!r}")
    return app

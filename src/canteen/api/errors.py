"""Translate domain errors into HTTP responses.

Protean's handlers cover validation (400), missing objects (404) and its
state errors. Three canteen errors need their own status codes on top.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers as register_protean_exception_handlers

from canteen.shared.errors import Forbidden, InternalError, InvalidTransition

logger = structlog.get_logger(__name__)


async def handle_invalid_transition(request: Request, exc: InvalidTransition):
    # More specific than ValidationError, so it wins over Protean's 400 handler
    return JSONResponse(
        status_code=409,
        content={
            "error": exc.messages,
            "current_status": exc.current_status,
            "requested_status": exc.requested_status,
        },
    )


async def handle_forbidden(request: Request, exc: Forbidden):
    return JSONResponse(status_code=403, content={"error": exc.messages, "required_role": exc.required_role})


async def handle_internal_error(request: Request, exc: InternalError):
    logger.error("Internal error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": exc.messages})


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_exception_handlers(app)
    app.add_exception_handler(InvalidTransition, handle_invalid_transition)
    app.add_exception_handler(Forbidden, handle_forbidden)
    app.add_exception_handler(InternalError, handle_internal_error)

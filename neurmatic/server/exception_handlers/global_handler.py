"""
Global Exception Handler for FastAPI Application.

This module provides a global exception handler that catches all unhandled
exceptions, logs them with an error ID and request context, and reports them
to error tracking.
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from neurmatic.core.errors import NeurmaticError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.monitoring import log_error

from .domain_handler import neurmatic_error_handler

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    Returns a JSON response with an error ID that clients can use to reference
    the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = uuid.uuid4().hex[:12]
    error_type = type(exc).__name__

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": error_type,
        },
    )
    log_error(
        error_type,
        str(exc),
        {"error_id": error_id, "method": request.method, "path": request.url.path},
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": error_type,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(NeurmaticError, neurmatic_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")

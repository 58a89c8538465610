"""
Handler for expected domain failures raised by the services.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from neurmatic.core.errors import NeurmaticError, UnauthorizedError
from neurmatic.core.logging_config import get_logger

logger = get_logger(__name__)


async def neurmatic_error_handler(request: Request, exc: NeurmaticError) -> JSONResponse:
    """Map a :class:`NeurmaticError` to its status code and ``detail``."""
    logger.info(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.detail}",
        extra={"status_code": exc.status_code, **exc.context},
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)

"""
Domain exceptions.

Services raise these; ``neurmatic.server.exception_handlers`` turns them into
JSON responses carrying ``status_code`` and ``detail``.
"""

from typing import Any, Optional


class NeurmaticError(Exception):
    """Base class of every expected, client-facing failure."""

    status_code: int = 400
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None, *, context: Optional[dict[str, Any]] = None):
        self.detail = detail or self.default_detail
        self.context = context or {}
        super().__init__(self.detail)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, detail={self.detail!r})"


class BadRequestError(NeurmaticError):
    """A business rule rejected the request."""

    status_code = 400
    default_detail = "Bad request"


class UnauthorizedError(NeurmaticError):
    status_code = 401
    default_detail = "Not authenticated"


class ForbiddenError(NeurmaticError):
    status_code = 403
    default_detail = "Not enough permissions"


class NotFoundError(NeurmaticError):
    status_code = 404
    default_detail = "Resource not found"


class ConflictError(NeurmaticError):
    """The resource already exists or clashes with a unique constraint."""

    status_code = 409
    default_detail = "Resource already exists"

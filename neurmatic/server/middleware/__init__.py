"""
Middleware modules for the Neurmatic API server.
"""

from .logfire_middleware import SLOW_REQUEST_MS, LogfireMiddleware

__all__ = ["LogfireMiddleware", "SLOW_REQUEST_MS"]

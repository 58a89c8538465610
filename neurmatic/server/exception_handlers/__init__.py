"""
Exception handlers for the Neurmatic API server.

Domain errors become ``{"detail": ...}`` responses with their own status;
anything else is answered by the global 500 handler.
"""

from .domain_handler import neurmatic_error_handler
from .global_handler import global_exception_handler, setup_exception_handlers

__all__ = ["global_exception_handler", "neurmatic_error_handler", "setup_exception_handlers"]

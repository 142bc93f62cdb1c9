"""API Core - shared utilities for API routes.

Usage:
    from wellpump.api.core import error_response, register_exception_handlers
"""

from .errors import error_response, register_exception_handlers

__all__ = [
    "error_response",
    "register_exception_handlers",
]

"""API middleware."""

from zycle.api.middleware.error_handler import ErrorHandlerMiddleware
from zycle.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]

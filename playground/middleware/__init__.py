"""HTTP middleware."""

from .exception_handler import playground_exception_handler
from .request_context import RequestContextMiddleware

__all__ = ["playground_exception_handler", "RequestContextMiddleware"]

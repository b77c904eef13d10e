# app/shared/middleware/__init__.py (async version)

from app.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware, PasswordProtectionMiddleware
from app.shared.middleware.error_handler_middleware import ErrorHandlerMiddleware, register_exception_handlers

# Export all for easy imports
__all__ = [
    "AsyncRequestLoggingMiddleware",
    "PasswordProtectionMiddleware",
    "ErrorHandlerMiddleware",
    "register_exception_handlers",
]

# app/shared/middleware/error_handler_middleware.py

import logging
import traceback
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.adapters.configuration.config import settings
from app.domain.exceptions import DomainException, DatabaseOperationException

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, code: str, details: Optional[Any] = None,
                   headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "code": code,
            "details": details,
        },
        headers=headers,
    )


def domain_error_response(e: DomainException) -> JSONResponse:
    message = e.message
    if isinstance(e, DatabaseOperationException):
        # O detalhe do banco fica só no log
        logger.error(f"[{e.internal_code}] {e.message}: {e.original_error}")
        message = DatabaseOperationException.PUBLIC_MESSAGE
    else:
        logger.warning(f"[{e.internal_code}] DomainException: {e.message}")

    headers = {"WWW-Authenticate": "Bearer"} if e.status_code == 401 else None
    return error_response(e.status_code, message, e.internal_code, e.details, headers)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)

        # 1. Exceções customizadas do domínio
        except DomainException as e:
            return domain_error_response(e)

        # 2. Erros inesperados
        except Exception:
            logger.exception(f"Erro inesperado em {request.url.path}")
            details = None
            if settings.DEBUG and not settings.is_production:
                details = {"traceback": traceback.format_exc()}
            return error_response(500, "Internal server error.", "INTERNAL_SERVER_ERROR", details)


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    return domain_error_response(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Erros de validação (Pydantic/FastAPI) viram HTTP 400.

    Only location, message and type are echoed back: the rejected input could
    be a password.
    """
    logger.warning(f"RequestValidationError on {request.url.path}")
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return error_response(400, "Invalid request data.", "VALIDATION_ERROR", details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Exceções HTTP padrão (404 de rota inexistente, 405, etc.)."""
    return error_response(exc.status_code, str(exc.detail), "HTTP_EXCEPTION", headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

"""
Errores de dominio y handlers globales para respuestas de error consistentes.

Los servicios lanzan subclases de `AppError`; aquí se traducen a HTTP con el
cuerpo `{"message": ..., "request_id": ...}`.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    """Base de los errores de dominio (mensaje + status HTTP sugerido)."""

    status_code: int = 400
    default_message: str = "Solicitud inválida"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Credenciales inválidas"


class OtpExpired(InvalidCredentials):
    status_code = 400
    default_message = "OTP expirado"


class OtpInvalid(InvalidCredentials):
    status_code = 400
    default_message = "OTP inválido"


class InvalidSession(AppError):
    status_code = 401
    default_message = "Sesión inválida o expirada"


class DecryptionError(AppError):
    status_code = 500
    default_message = "No se pudo descifrar el secreto"


class RateLimited(AppError):
    status_code = 429
    default_message = "Demasiadas solicitudes, espera un momento"

    def __init__(self, message: str | None = None, retry_after: int = 0) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class NotConfigured(AppError):
    status_code = 503
    default_message = "SMTP no configurado"


class NotFound(AppError):
    status_code = 404
    default_message = "No encontrado"


class Conflict(AppError):
    status_code = 409
    default_message = "Ya existe"


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message, **extra}
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("quill.errors")

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("%s request_id=%s", type(exc).__name__, _req_id(request))
        else:
            log.info("%s status=%s request_id=%s", type(exc).__name__, exc.status_code, _req_id(request))
        headers = None
        if isinstance(exc, RateLimited) and exc.retry_after:
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(status_code=exc.status_code, content=_body(request, exc.message), headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=_body(request, exc.detail or "HTTP error"))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=422, content=_body(request, "Validation error", errors=jsonable_encoder(exc.errors())))

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error request_id=%s", _req_id(request))
        return JSONResponse(status_code=500, content=_body(request, "Internal server error"))

"""
Middlewares de aplicación: request id, cabeceras no-store en auth, logging por petición y CORS.
"""
import logging
import re
import time
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings

# Un id entrante solo se acepta si no puede ensuciar los logs
_RID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get("X-Request-Id") or ""
        rid = incoming if _RID_RE.match(incoming) else uuid.uuid4().hex
        request.state.request_id = rid
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response


class NoStoreMiddleware(BaseHTTPMiddleware):
    """Las respuestas de auth llevan tokens: ningún cache intermedio debe guardarlas."""

    def __init__(self, app: FastAPI, prefixes: tuple) -> None:
        super().__init__(app)
        self.prefixes = prefixes

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(self.prefixes):
            response.headers["Cache-Control"] = "no-store"
            response.headers["Pragma"] = "no-cache"
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("quill.request")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt_ms = int((time.perf_counter() - start) * 1000)
            self.log.info(
                "method=%s path=%s status=%s latency_ms=%s ip=%s request_id=%s",
                request.method,
                request.url.path,
                status,
                dt_ms,
                request.client.host if request.client else "-",
                getattr(request.state, "request_id", None),
            )


def add_middlewares(app: FastAPI) -> None:
    # El refresh viaja en cookie: credentials=True con la lista de orígenes de settings
    cors_kwargs = dict(
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    if settings.cors_allow_any:
        # Cualquier origen solo sin credenciales: la cookie de refresh exige orígenes explícitos
        cors_kwargs["allow_origins"] = []
        cors_kwargs["allow_origin_regex"] = ".*"
        cors_kwargs["allow_credentials"] = False
    app.add_middleware(CORSMiddleware, **cors_kwargs)
    prefix = settings.api_prefix_normalized
    app.add_middleware(NoStoreMiddleware, prefixes=(f"{prefix}/auth", f"{prefix}/admin"))
    # LoggingMiddleware queda como el más externo y ve el request_id ya asignado
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(LoggingMiddleware)

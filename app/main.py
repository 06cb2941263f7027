"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.router import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import add_middlewares
from app.core.rate_limit import FixedWindowRateLimiter
from app.infrastructure.db.bootstrap import ensure_collections
from app.infrastructure.db.mongo import close_mongo, db_ready, init_mongo

_log = logging.getLogger("quill.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = settings.missing_required()
    if missing:
        raise RuntimeError(f"Faltan variables de entorno: {', '.join(missing)}")

    app.state.otp_limiter = FixedWindowRateLimiter(
        limit=settings.otp_rate_limit_max,
        window_seconds=settings.otp_rate_limit_window_seconds,
    )
    if not db_ready():
        init_mongo()
    if db_ready():
        ensure_collections()
    else:
        _log.warning("Mongo no listo; omitiendo ensure_collections()")
    yield
    close_mongo()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    add_middlewares(app)
    register_exception_handlers(app)
    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    return app


app = create_app()

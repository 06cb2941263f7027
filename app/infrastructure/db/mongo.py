"""Cliente MongoDB (pymongo) compartido por los repositorios."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import certifi
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.core.config import settings

_log = logging.getLogger("quill.mongo")

_client: MongoClient | None = None
_db: Database | None = None


def utcnow() -> datetime:
    """Hora actual en UTC naive: así guarda y devuelve Mongo las fechas."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_mongo() -> None:
    """
    Inicializa el cliente y valida conexión (ping).
    Llamar una sola vez en el startup de FastAPI.
    """
    global _client, _db
    uri = settings.mongo_uri
    kwargs = dict(serverSelectionTimeoutMS=15000)
    if uri.startswith("mongodb+srv://") or settings.mongo_tls:
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsAllowInvalidCertificates"] = bool(settings.mongo_tls_insecure)
    try:
        _client = MongoClient(uri, **kwargs)
        _client.admin.command("ping")
        _db = _client[settings.mongo_db]
        _log.info("Mongo conectado (db=%s)", settings.mongo_db)
    except PyMongoError as e:
        # No tumbar la app: deja _db en None y loggea
        _log.warning("Mongo no accesible: %s", e)
        _client = None
        _db = None


def use_database(db: Database) -> None:
    """Inyecta una base ya construida (tests o scripts)."""
    global _db
    _db = db


def get_db() -> Database:
    """
    Devuelve la referencia a la base de datos.
    Úsalo en repositorios/servicios, no en routers.
    """
    if _db is None:
        raise RuntimeError("Mongo no inicializado. Intenta más tarde.")
    return _db


def db_ready() -> bool:
    return _db is not None


def close_mongo() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None

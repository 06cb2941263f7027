"""
Bootstrap de la base Mongo: índices mínimos de las colecciones de auth, OTP y SMTP.
Se ejecuta al inicio de la app; no tumba el arranque si algún índice falla.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging
from pymongo.errors import PyMongoError
from app.infrastructure.db.mongo import get_db

_log = logging.getLogger("quill.mongo.bootstrap")

INDEXES: Dict[str, List[Dict[str, Any]]] = {
    "token_session": [
        {"keys": [("refresh_id", 1)], "unique": True, "name": "uniq_refresh_id"},
        {"keys": [("subject_id", 1), ("audience", 1), ("revoked_at", 1)], "name": "subject_audience_active"},
    ],
    "otp_code": [
        {"keys": [("email", 1)], "name": "email"},
        # Limpieza pasiva: Mongo borra el documento al vencer expires_at
        {"keys": [("expires_at", 1)], "expireAfterSeconds": 0, "name": "ttl_expires_at"},
    ],
    "user": [
        {"keys": [("email", 1)], "unique": True, "name": "uniq_email"},
    ],
    "admin_profile": [
        {"keys": [("email", 1)], "unique": True, "name": "uniq_email"},
    ],
    "smtp_config": [
        {"keys": [("updated_at", -1)], "name": "updated_at_desc"},
    ],
}


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for ix in indexes:
        opts = dict(ix)
        keys = opts.pop("keys")
        try:
            coll.create_index(keys, **opts)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., ya existe con otras opciones o datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


def ensure_collections() -> None:
    """Garantiza los índices de todas las colecciones conocidas."""
    for name, indexes in INDEXES.items():
        _ensure_indexes(name, indexes)

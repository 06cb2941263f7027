"""Configuración SMTP (colección `smtp_config`). El password llega ya cifrado."""
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId

from app.infrastructure.db.mongo import get_db, utcnow

COLL = "smtp_config"


def _oid(config_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(config_id)
    except (InvalidId, TypeError):
        return None


def insert_config(*, host: str, port: int, username: str, password_enc: str, created_by: Optional[str]) -> str:
    now = utcnow()
    res = get_db()[COLL].insert_one(
        {
            "host": host,
            "port": int(port),
            "username": username,
            "password_enc": password_enc,
            "created_by": created_by,
            "updated_by": None,
            "created_at": now,
            "updated_at": now,
        }
    )
    return str(res.inserted_id)


def get_latest() -> Optional[Dict[str, Any]]:
    """La configuración activa es la actualizada más recientemente."""
    return get_db()[COLL].find_one({}, sort=[("updated_at", -1), ("_id", -1)])


def update_config(config_id: str, patch: Dict[str, Any]) -> bool:
    oid = _oid(config_id)
    if oid is None:
        return False
    data = dict(patch)
    data["updated_at"] = utcnow()
    res = get_db()[COLL].update_one({"_id": oid}, {"$set": data})
    return res.matched_count > 0


def delete_config(config_id: str) -> bool:
    oid = _oid(config_id)
    if oid is None:
        return False
    res = get_db()[COLL].delete_one({"_id": oid})
    return res.deleted_count > 0

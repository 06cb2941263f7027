"""Repositorio de la colección `user` (usuarios que entran por OTP)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from app.infrastructure.db.mongo import get_db, utcnow

COLL = "user"
PROFILE_FIELDS = ("name", "mobile", "address")
PUBLIC_PROJECTION = {"name": 1, "email": 1, "mobile": 1, "address": 1, "created_at": 1}


def _oid(user_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


def get_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    oid = _oid(user_id)
    if oid is None:
        return None
    return get_db()[COLL].find_one({"_id": oid})


def get_or_create_by_email(email: str) -> Dict[str, Any]:
    """Upsert por email; un usuario borrado (soft delete) se reactiva al volver a entrar."""
    now = utcnow()
    return get_db()[COLL].find_one_and_update(
        {"email": email},
        {
            "$set": {"is_deleted": False, "updated_at": now},
            "$setOnInsert": {
                "email": email,
                "name": None,
                "mobile": None,
                "address": None,
                "created_at": now,
            },
        },
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )


def soft_delete(user_id: str) -> bool:
    oid = _oid(user_id)
    if oid is None:
        return False
    res = get_db()[COLL].update_one({"_id": oid}, {"$set": {"is_deleted": True, "updated_at": utcnow()}})
    return res.matched_count > 0


def read_field(user_id: str, field: str) -> Any:
    doc = get_by_id(user_id) or {}
    return doc.get(field)


def set_field(user_id: str, field: str, value: Any) -> Any:
    """Asigna un campo del perfil y devuelve el valor guardado."""
    oid = _oid(user_id)
    if oid is None:
        return None
    doc = get_db()[COLL].find_one_and_update(
        {"_id": oid},
        {"$set": {field: value, "updated_at": utcnow()}},
        projection={field: 1},
        return_document=ReturnDocument.AFTER,
    )
    return (doc or {}).get(field)


def count_active() -> int:
    return get_db()[COLL].count_documents({"is_deleted": False})


def list_active(page: int, page_size: int) -> List[Dict[str, Any]]:
    """Usuarios no borrados, más recientes primero."""
    cursor = (
        get_db()[COLL]
        .find({"is_deleted": False}, PUBLIC_PROJECTION)
        .sort("created_at", -1)
        .skip((page - 1) * page_size)
        .limit(page_size)
    )
    items = []
    for d in cursor:
        d["id"] = str(d.pop("_id"))
        items.append(d)
    return items

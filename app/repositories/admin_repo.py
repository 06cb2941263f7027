"""Perfil del admin único (colección `admin_profile`)."""
from typing import Any, Dict, Optional

from pymongo import ReturnDocument

from app.infrastructure.db.mongo import get_db, utcnow

COLL = "admin_profile"


def ensure_profile(email: str) -> None:
    """Crea el perfil vacío si no existe (se llama en cada login)."""
    now = utcnow()
    get_db()[COLL].update_one(
        {"email": email},
        {"$setOnInsert": {"email": email, "name": None, "created_at": now, "updated_at": now}},
        upsert=True,
    )


def get_profile(email: str) -> Optional[Dict[str, Any]]:
    return get_db()[COLL].find_one({"email": email})


def set_name(email: str, name: Optional[str]) -> Optional[str]:
    doc = get_db()[COLL].find_one_and_update(
        {"email": email},
        {"$set": {"name": name, "updated_at": utcnow()}, "$setOnInsert": {"created_at": utcnow()}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return (doc or {}).get("name")

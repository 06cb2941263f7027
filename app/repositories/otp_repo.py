"""Persistencia de códigos OTP (colección `otp_code`). Solo hashes, nunca el código."""
from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from app.infrastructure.db.mongo import get_db, utcnow

COLLECTION = "otp_code"


def delete_for_email(email: str) -> int:
    res = get_db()[COLLECTION].delete_many({"email": email})
    return res.deleted_count


def insert_code(email: str, code_hash: str, expires_at: datetime) -> str:
    res = get_db()[COLLECTION].insert_one(
        {
            "email": email,
            "code_hash": code_hash,
            "expires_at": expires_at,
            "attempts": 0,
            "created_at": utcnow(),
        }
    )
    return str(res.inserted_id)


def find_latest(email: str) -> Optional[Dict[str, Any]]:
    """El código vigente de un email (el más reciente si hubiera varios)."""
    return get_db()[COLLECTION].find_one({"email": email}, sort=[("created_at", -1)])


def consume(entry_id: ObjectId) -> Optional[Dict[str, Any]]:
    """Borra el código concreto; None si otra verificación ya lo consumió."""
    return get_db()[COLLECTION].find_one_and_delete({"_id": entry_id})


def register_failure(entry_id: ObjectId) -> int:
    """Incrementa el contador de intentos fallidos y devuelve el nuevo valor (0 si ya no existe)."""
    doc = get_db()[COLLECTION].find_one_and_update(
        {"_id": entry_id},
        {"$inc": {"attempts": 1}},
        return_document=ReturnDocument.AFTER,
    )
    return int(doc.get("attempts", 0)) if doc else 0

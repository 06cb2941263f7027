"""
Ledger de sesiones de refresh (colección `token_session`).

Cada refresh token emitido tiene una fila; solo se modifica para marcar
`revoked_at`. Nunca se borran filas desde aquí.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pymongo import ReturnDocument

from app.infrastructure.db.mongo import get_db, utcnow

COLLECTION = "token_session"


def insert_session(
    *,
    audience: str,
    subject_id: str,
    refresh_id: str,
    expires_at: datetime,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> str:
    """Inserta una sesión activa y devuelve su id (str)."""
    doc = {
        "audience": audience,
        "subject_id": subject_id,
        "refresh_id": refresh_id,
        "ip": ip,
        "user_agent": user_agent,
        "created_at": utcnow(),
        "expires_at": expires_at,
        "revoked_at": None,
        "revoked_reason": None,
    }
    res = get_db()[COLLECTION].insert_one(doc)
    return str(res.inserted_id)


def get_by_refresh_id(refresh_id: str) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one({"refresh_id": refresh_id})


def claim_active(refresh_id: str, reason: str, audience: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Revoca atómicamente la sesión si sigue activa y vigente.

    Es un único update condicional: de varias llamadas concurrentes con el mismo
    `refresh_id` solo una recibe el documento; el resto recibe None.
    """
    now = utcnow()
    filtro: Dict[str, Any] = {"refresh_id": refresh_id, "revoked_at": None, "expires_at": {"$gt": now}}
    if audience:
        filtro["audience"] = audience
    return get_db()[COLLECTION].find_one_and_update(
        filtro,
        {"$set": {"revoked_at": now, "revoked_reason": reason}},
        return_document=ReturnDocument.AFTER,
    )


def revoke_one(refresh_id: str, reason: str) -> bool:
    """Revoca por refresh_id si sigue activa. Devuelve True si cambió algo."""
    res = get_db()[COLLECTION].update_one(
        {"refresh_id": refresh_id, "revoked_at": None},
        {"$set": {"revoked_at": utcnow(), "revoked_reason": reason}},
    )
    return res.modified_count > 0


def revoke_all_for_subject(subject_id: str, audience: str, reason: str) -> int:
    """Revoca todas las sesiones activas de un sujeto/audiencia. Devuelve cuántas."""
    res = get_db()[COLLECTION].update_many(
        {"subject_id": subject_id, "audience": audience, "revoked_at": None},
        {"$set": {"revoked_at": utcnow(), "revoked_reason": reason}},
    )
    return res.modified_count


def count_active(subject_id: str, audience: str) -> int:
    return get_db()[COLLECTION].count_documents(
        {"subject_id": subject_id, "audience": audience, "revoked_at": None, "expires_at": {"$gt": utcnow()}}
    )

"""Servicios de perfil: campos sueltos del usuario y nombre del admin.

Semántica por campo:
- create: falla con Conflict si ya tiene valor.
- update: reemplaza (crea si no existía).
- delete: deja el campo en None.
"""

from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import Conflict
from app.repositories import admin_repo, user_repo


def _clean(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


# --- Usuario ---

def read_user_field(user_id: str, field: str) -> Any:
    return user_repo.read_field(user_id, field)


def create_user_field(user_id: str, field: str, value: Optional[str]) -> Any:
    if user_repo.read_field(user_id, field):
        raise Conflict(f"{field} ya existe. Usa PUT.")
    return user_repo.set_field(user_id, field, _clean(value))


def update_user_field(user_id: str, field: str, value: Optional[str]) -> Any:
    return user_repo.set_field(user_id, field, _clean(value))


def delete_user_field(user_id: str, field: str) -> Any:
    return user_repo.set_field(user_id, field, None)


# --- Admin ---

def _admin_email() -> str:
    return (settings.admin_email or "").strip().lower()


def read_admin_name() -> Optional[str]:
    return (admin_repo.get_profile(_admin_email()) or {}).get("name")


def create_admin_name(value: Optional[str]) -> Optional[str]:
    if read_admin_name():
        raise Conflict("El nombre ya existe. Usa PUT.")
    return admin_repo.set_name(_admin_email(), _clean(value))


def update_admin_name(value: Optional[str]) -> Optional[str]:
    return admin_repo.set_name(_admin_email(), _clean(value))


def delete_admin_name() -> Optional[str]:
    return admin_repo.set_name(_admin_email(), None)


# --- Insights ---

def users_count() -> int:
    return user_repo.count_active()


def users_page(page: int, page_size: int) -> Dict[str, Any]:
    page = max(1, page)
    page_size = max(1, min(100, page_size))
    items: List[Dict[str, Any]] = user_repo.list_active(page, page_size)
    for it in items:
        if it.get("created_at") is not None:
            it["created_at"] = it["created_at"].isoformat()
    return {"items": items, "page": page, "page_size": page_size}

"""Casos de uso de la configuración SMTP (solo admin)."""
from typing import Any, Dict, Optional

from app.core.exceptions import NotFound
from app.infrastructure.security.crypto import encrypt
from app.repositories import smtp_repo

MASK = "****"


def create_config(*, host: str, port: int, username: str, password: str, actor: Optional[str]) -> str:
    """Guarda una configuración nueva con el password cifrado. Devuelve id."""
    return smtp_repo.insert_config(
        host=host,
        port=port,
        username=username,
        password_enc=encrypt(password),
        created_by=actor,
    )


def read_config() -> Optional[Dict[str, Any]]:
    """Configuración activa con el password enmascarado (nunca en claro)."""
    cfg = smtp_repo.get_latest()
    if not cfg:
        return None
    return {
        "id": str(cfg["_id"]),
        "host": cfg.get("host"),
        "port": cfg.get("port"),
        "username": cfg.get("username"),
        "password": MASK,
    }


def update_config(config_id: str, patch: Dict[str, Any], actor: Optional[str]) -> None:
    data = {k: v for k, v in patch.items() if v is not None}
    password = data.pop("password", None)
    if password:
        data["password_enc"] = encrypt(password)
    data["updated_by"] = actor
    if not smtp_repo.update_config(config_id, data):
        raise NotFound("Configuración SMTP no encontrada")


def delete_config(config_id: str) -> None:
    if not smtp_repo.delete_config(config_id):
        raise NotFound("Configuración SMTP no encontrada")

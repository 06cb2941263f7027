"""
Códigos OTP de un solo uso por email.

- `issue`: genera 6 dígitos, reemplaza cualquier código previo y guarda solo el hash.
- `verify`: valida expiración y hash; un acierto consume el código, y agotar
  los intentos también lo elimina.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta

from app.core.config import settings
from app.core.exceptions import OtpExpired, OtpInvalid
from app.infrastructure.db.mongo import utcnow
from app.infrastructure.security.crypto import hash_secret, verify_secret
from app.repositories import otp_repo as repo

_log = logging.getLogger("quill.otp")

CODE_LENGTH = 6


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def generate_code(length: int = CODE_LENGTH) -> str:
    """Código numérico uniforme con ceros a la izquierda."""
    return str(secrets.randbelow(10 ** length)).zfill(length)


def issue(email: str) -> str:
    """Reemplaza los códigos del email por uno nuevo y devuelve el código en claro."""
    email = normalize_email(email)
    code = generate_code()
    code_hash = hash_secret(code)
    expires_at = utcnow() + timedelta(minutes=settings.otp_expire_minutes)
    repo.delete_for_email(email)
    repo.insert_code(email, code_hash, expires_at)
    _log.info("otp issued email=%s", email)
    return code


def _expired(expires_at: datetime | None) -> bool:
    if expires_at is None:
        return True
    if expires_at.tzinfo is not None:
        expires_at = expires_at.replace(tzinfo=None)
    return utcnow() > expires_at


def verify(email: str, code: str) -> None:
    """Valida el código; lanza OtpExpired u OtpInvalid si no procede."""
    email = normalize_email(email)
    entry = repo.find_latest(email)
    if not entry or _expired(entry.get("expires_at")):
        raise OtpExpired()

    if not verify_secret((code or "").strip(), entry.get("code_hash") or ""):
        attempts = repo.register_failure(entry["_id"])
        if attempts >= settings.otp_max_attempts:
            repo.delete_for_email(email)
            _log.warning("otp attempts exhausted email=%s", email)
        raise OtpInvalid()

    # Solo una verificación concurrente puede consumir la entrada
    if repo.consume(entry["_id"]) is None:
        raise OtpExpired()
    repo.delete_for_email(email)
    _log.info("otp verified email=%s", email)

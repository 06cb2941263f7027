"""
Emisión, rotación y revocación de sesiones de refresh.

Cada par emitido queda respaldado por una fila del ledger (`token_session`);
el refresh JWT solo transporta su `refresh_id` (claim `sid`). La rotación
es de un solo uso: revoca la fila con un update condicional y emite un par
nuevo para el mismo sujeto/audiencia.

Los access tokens no consultan el ledger: su revocación efectiva es la
ventana de ACCESS_TOKEN_EXPIRE_MINUTES.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import uuid4

from app.core.config import settings
from app.core.exceptions import InvalidSession
from app.infrastructure.db.mongo import utcnow
from app.infrastructure.security import token_service
from app.repositories import token_session_repo as repo

_log = logging.getLogger("quill.sessions")

ADMIN = "admin"
USER = "user"
AUDIENCES = (ADMIN, USER)


@dataclass(frozen=True)
class TokenPair:
    access: str
    refresh: str
    refresh_id: str


def _check_audience(audience: str) -> None:
    if audience not in AUDIENCES:
        raise ValueError(f"Audiencia desconocida: {audience}")


def issue_tokens(
    subject_id: str,
    audience: str,
    *,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> TokenPair:
    """Crea una sesión activa en el ledger y devuelve el par access/refresh."""
    _check_audience(audience)
    refresh_id = uuid4().hex
    expires_at = utcnow() + timedelta(days=settings.refresh_token_expire_days)
    repo.insert_session(
        audience=audience,
        subject_id=subject_id,
        refresh_id=refresh_id,
        expires_at=expires_at,
        ip=ip,
        user_agent=user_agent,
    )
    access = token_service.create_access_token(subject_id=subject_id, audience=audience)
    refresh = token_service.create_refresh_token(refresh_id=refresh_id, audience=audience, expires_at=expires_at)
    _log.info("session issued audience=%s subject=%s sid=%s", audience, subject_id, refresh_id)
    return TokenPair(access=access, refresh=refresh, refresh_id=refresh_id)


def rotate_refresh(
    refresh_id: str,
    *,
    audience: Optional[str] = None,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> TokenPair:
    """
    Cambia un refresh vigente por un par nuevo e invalida el anterior.

    Un `refresh_id` desconocido, ya revocado (reuso) o vencido -> InvalidSession.
    Si se pasa `audience`, una sesión de otra audiencia también se rechaza.
    """
    current = repo.claim_active(refresh_id, reason="rotated", audience=audience)
    if not current:
        _log.info("rotation rejected sid=%s", refresh_id)
        raise InvalidSession()
    return issue_tokens(current["subject_id"], current["audience"], ip=ip, user_agent=user_agent)


def revoke_by_sid(refresh_id: str, reason: str = "logout") -> None:
    """Revoca una sesión; no hace nada si ya estaba revocada o no existe."""
    if repo.revoke_one(refresh_id, reason=reason):
        _log.info("session revoked sid=%s reason=%s", refresh_id, reason)


def revoke_all(subject_id: str, audience: str) -> int:
    """Revoca todas las sesiones activas del sujeto en esa audiencia."""
    _check_audience(audience)
    n = repo.revoke_all_for_subject(subject_id, audience, reason="revoke_all")
    _log.info("sessions revoked audience=%s subject=%s count=%s", audience, subject_id, n)
    return n


def rotate_refresh_token(
    raw_token: str,
    *,
    audience: str,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> TokenPair:
    """Valida el refresh JWT presentado y rota su sesión.

    Con `refresh_reuse_revokes_all`, presentar un refresh ya revocado se trata
    como posible robo y se revocan todas las sesiones de ese sujeto.
    """
    claims = token_service.decode_refresh_token(raw_token)
    sid = claims["sid"]
    try:
        return rotate_refresh(sid, audience=audience, ip=ip, user_agent=user_agent)
    except InvalidSession:
        if settings.refresh_reuse_revokes_all:
            row = repo.get_by_refresh_id(sid)
            if row and row.get("revoked_at") is not None and row.get("audience") == audience:
                _log.warning("refresh reuse detected sid=%s subject=%s", sid, row.get("subject_id"))
                revoke_all(row["subject_id"], row["audience"])
        raise


def revoke_refresh_token(raw_token: Optional[str]) -> None:
    """Logout idempotente: un token ausente, inválido o expirado se ignora."""
    if not raw_token:
        return
    try:
        claims = token_service.decode_refresh_token(raw_token)
    except InvalidSession:
        return
    revoke_by_sid(claims["sid"])

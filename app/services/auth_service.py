"""
Lógica de autenticación: login admin, OTP de usuarios, refresh, logout y borrado de cuenta.
"""
from typing import Optional
import hmac
import logging

from app.core.config import settings
from app.core.exceptions import InvalidCredentials, InvalidSession
from app.infrastructure.email import email_client
from app.repositories import admin_repo, user_repo
from app.services import otp_service, session_service
from app.services.session_service import ADMIN, USER, TokenPair

_log = logging.getLogger("quill.auth")


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def login_admin(*, email: str, password: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> TokenPair:
    """Valida contra el admin configurado y emite tokens con audiencia admin."""
    admin_email = (settings.admin_email or "").strip().lower()
    admin_password = settings.admin_password or ""
    email = (email or "").strip().lower()
    if not admin_email or not admin_password:
        raise InvalidCredentials()
    # Ambas comparaciones siempre se evalúan
    email_ok = _same(email, admin_email)
    password_ok = _same(password or "", admin_password)
    if not (email_ok and password_ok):
        _log.info("admin login rejected")
        raise InvalidCredentials()

    pair = session_service.issue_tokens(admin_email, ADMIN, ip=ip, user_agent=user_agent)
    admin_repo.ensure_profile(admin_email)
    return pair


def request_otp(email: str) -> None:
    """Emite un código para el email y lo envía con el SMTP configurado."""
    code = otp_service.issue(email)
    email_client.send_otp_email(otp_service.normalize_email(email), code, settings.otp_expire_minutes)


def verify_otp(*, email: str, code: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> TokenPair:
    """Consume el OTP, crea (o reactiva) el usuario y emite tokens con audiencia user."""
    otp_service.verify(email, code)
    user = user_repo.get_or_create_by_email(otp_service.normalize_email(email))
    return session_service.issue_tokens(str(user["_id"]), USER, ip=ip, user_agent=user_agent)


def refresh(raw_token: Optional[str], *, audience: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> TokenPair:
    if not raw_token:
        raise InvalidSession("Falta refresh token")
    return session_service.rotate_refresh_token(raw_token, audience=audience, ip=ip, user_agent=user_agent)


def logout(raw_token: Optional[str]) -> None:
    session_service.revoke_refresh_token(raw_token)


def logout_everywhere(subject_id: str, audience: str) -> int:
    return session_service.revoke_all(subject_id, audience)


def delete_account(user_id: str) -> None:
    """Soft delete del usuario y revocación de todas sus sesiones."""
    user_repo.soft_delete(user_id)
    session_service.revoke_all(user_id, USER)

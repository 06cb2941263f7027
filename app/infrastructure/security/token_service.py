"""
Creación y verificación de JWTs de acceso y de refresh.

- Access: corto (minutos), sin estado, firmado con JWT_ACCESS_SECRET.
  Claims: sub, aud (admin|user), typ=access, iat, exp, jti.
- Refresh: largo (días), firmado con JWT_REFRESH_SECRET (clave separada).
  Claims: sid (refresh_id del ledger), aud, typ=refresh, iat, exp.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

import jwt as pyjwt

from app.core.config import settings
from app.core.exceptions import InvalidSession

ACCESS = "access"
REFRESH = "refresh"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _require(secret: str | None, name: str) -> str:
    if not secret:
        raise RuntimeError(f"{name} no configurado")
    return secret


def create_access_token(*, subject_id: str, audience: str) -> str:
    """JWT de acceso válido por ACCESS_TOKEN_EXPIRE_MINUTES."""
    now = _now_utc()
    exp = now + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": subject_id,
        "aud": audience,
        "typ": ACCESS,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "jti": uuid4().hex,
    }
    secret = _require(settings.jwt_access_secret, "JWT_ACCESS_SECRET")
    return pyjwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str, audience: str) -> Dict[str, Any]:
    """
    Decodifica y valida firma, expiración y audiencia. Devuelve payload.

    Lanza `jwt.InvalidAudienceError` si el token es de otra audiencia y
    `jwt.PyJWTError` para cualquier otro fallo.
    """
    secret = _require(settings.jwt_access_secret, "JWT_ACCESS_SECRET")
    payload = pyjwt.decode(
        token,
        key=secret,
        algorithms=[settings.jwt_algorithm],
        audience=audience,
        options={"require": ["sub", "aud", "exp"]},
    )
    if payload.get("typ") != ACCESS:
        raise pyjwt.InvalidTokenError("Tipo de token inválido")
    return payload


def create_refresh_token(*, refresh_id: str, audience: str, expires_at: datetime) -> str:
    """JWT de refresh; `expires_at` coincide con la expiración de la fila del ledger."""
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    payload = {
        "sid": refresh_id,
        "aud": audience,
        "typ": REFRESH,
        "iat": int(_now_utc().timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    secret = _require(settings.jwt_refresh_secret, "JWT_REFRESH_SECRET")
    return pyjwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """Valida firma y expiración del refresh. Cualquier fallo -> InvalidSession."""
    secret = _require(settings.jwt_refresh_secret, "JWT_REFRESH_SECRET")
    try:
        payload = pyjwt.decode(
            token,
            key=secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sid", "exp"], "verify_aud": False},
        )
    except pyjwt.PyJWTError:
        raise InvalidSession("Refresh token inválido o expirado") from None
    if payload.get("typ") != REFRESH or not payload.get("sid"):
        raise InvalidSession("Refresh token inválido o expirado")
    return payload

"""
Dependencias reutilizables para routers (FastAPI Depends).

- Autenticación: valida el access token (firma, expiración y audiencia) sin
  consultar el ledger; devuelve el id del sujeto.
- Rate limit del pedido de OTP por IP.
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
from typing import Optional, Tuple

import jwt as pyjwt
from fastapi import Header, HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from app.core.exceptions import RateLimited
from app.core.rate_limit import RateLimiter
from app.infrastructure.security.token_service import verify_access_token
from app.services.session_service import ADMIN, USER


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


def _subject_for(authorization: Optional[str], audience: str) -> str:
    token = _bearer(authorization)
    if not token:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Falta token")
    try:
        payload = verify_access_token(token, audience)
    except pyjwt.InvalidAudienceError:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=f"Prohibido: solo {audience}")
    except pyjwt.PyJWTError:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Token inválido o expirado")
    return str(payload["sub"])


def require_admin(authorization: Optional[str] = Header(default=None)) -> str:
    """Email del admin autenticado."""
    return _subject_for(authorization, ADMIN)


def require_user(authorization: Optional[str] = Header(default=None)) -> str:
    """Id (str) del usuario autenticado."""
    return _subject_for(authorization, USER)


def client_info(request: Request) -> Tuple[str, str]:
    ip = request.client.host if request.client else ""
    ua = request.headers.get("user-agent", "")
    return ip, ua


def get_otp_limiter(request: Request) -> RateLimiter:
    return request.app.state.otp_limiter


def otp_rate_limit(request: Request) -> None:
    """Limita pedidos de OTP por IP (ventana y máximo desde settings)."""
    ip, _ = client_info(request)
    decision = get_otp_limiter(request).check(ip or "unknown")
    if not decision.allowed:
        raise RateLimited("Demasiados pedidos de OTP", retry_after=decision.retry_after_seconds)

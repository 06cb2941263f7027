"""Cookie HTTP-only del refresh token, con path por audiencia."""
from typing import Optional

from fastapi import Request, Response

from app.core.config import settings


def set_refresh_cookie(resp: Response, token: str, path: str) -> None:
    resp.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.refresh_cookie_max_age,
        path=path,
        domain=settings.cookie_domain,
    )


def clear_refresh_cookie(resp: Response, path: str) -> None:
    resp.delete_cookie(key=settings.refresh_cookie_name, path=path, domain=settings.cookie_domain)


def read_refresh_cookie(req: Request) -> Optional[str]:
    val = (req.cookies.get(settings.refresh_cookie_name) or "").strip()
    return val or None

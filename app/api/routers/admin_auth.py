"""Rutas del admin: login, refresh, logout, perfil (nombre) e insights de usuarios."""
from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.cookies import clear_refresh_cookie, read_refresh_cookie, set_refresh_cookie
from app.api.deps import client_info, require_admin
from app.api.schemas.auth import AccessOut, AdminLoginPayload, LoggedOutOut, RevokedOut
from app.api.schemas.profile import NameIn, UsersCountOut, UsersPageOut
from app.core.config import settings
from app.services import auth_service as service
from app.services import profile_service
from app.services.session_service import ADMIN

router = APIRouter(prefix="/admin/auth", tags=["Admin"])


def _cookie_path() -> str:
    return f"{settings.api_prefix_normalized}{router.prefix}"


@router.post("/login", response_model=AccessOut, summary="Login del admin")
def login(payload: AdminLoginPayload, request: Request, response: Response) -> AccessOut:
    ip, ua = client_info(request)
    pair = service.login_admin(email=payload.email, password=payload.password, ip=ip, user_agent=ua)
    set_refresh_cookie(response, pair.refresh, _cookie_path())
    return AccessOut(access=pair.access)


@router.post("/refresh", response_model=AccessOut, summary="Rotar refresh token del admin")
def refresh(request: Request, response: Response) -> AccessOut:
    ip, ua = client_info(request)
    pair = service.refresh(read_refresh_cookie(request), audience=ADMIN, ip=ip, user_agent=ua)
    set_refresh_cookie(response, pair.refresh, _cookie_path())
    return AccessOut(access=pair.access)


@router.post("/logout", response_model=LoggedOutOut, summary="Cerrar sesión del admin")
def logout(request: Request, response: Response) -> LoggedOutOut:
    service.logout(read_refresh_cookie(request))
    clear_refresh_cookie(response, _cookie_path())
    return LoggedOutOut(logged_out=True)


@router.post("/logout-all", response_model=RevokedOut, summary="Revocar todas las sesiones del admin")
def logout_all(response: Response, admin_email: str = Depends(require_admin)) -> RevokedOut:
    n = service.logout_everywhere(admin_email, ADMIN)
    clear_refresh_cookie(response, _cookie_path())
    return RevokedOut(revoked=n)


# === Perfil: nombre ===

@router.post("/profile/name", response_model=dict, status_code=status.HTTP_201_CREATED)
def name_create(payload: NameIn, _admin: str = Depends(require_admin)) -> dict:
    return {"name": profile_service.create_admin_name(payload.name)}


@router.get("/profile/name", response_model=dict)
def name_read(_admin: str = Depends(require_admin)) -> dict:
    return {"name": profile_service.read_admin_name()}


@router.put("/profile/name", response_model=dict)
def name_update(payload: NameIn, _admin: str = Depends(require_admin)) -> dict:
    return {"name": profile_service.update_admin_name(payload.name)}


@router.delete("/profile/name", response_model=dict)
def name_delete(_admin: str = Depends(require_admin)) -> dict:
    return {"name": profile_service.delete_admin_name()}


# === Insights ===

@router.get("/users/count", response_model=UsersCountOut, summary="Usuarios activos")
def users_count(_admin: str = Depends(require_admin)) -> UsersCountOut:
    return UsersCountOut(count=profile_service.users_count())


@router.get("/users", response_model=UsersPageOut, summary="Listado paginado de usuarios")
def users_list(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    _admin: str = Depends(require_admin),
) -> UsersPageOut:
    return UsersPageOut(**profile_service.users_page(page, page_size))

"""Rutas de usuarios: OTP, refresh, logout, borrado de cuenta y perfil (name/mobile/address)."""
from fastapi import APIRouter, Depends, Request, Response, status

from app.api.cookies import clear_refresh_cookie, read_refresh_cookie, set_refresh_cookie
from app.api.deps import client_info, otp_rate_limit, require_user
from app.api.schemas.auth import (
    AccessOut,
    DeletedOut,
    LoggedOutOut,
    OtpRequestPayload,
    OtpVerifyPayload,
    RevokedOut,
    SentOut,
)
from app.api.schemas.profile import AddressIn, MobileIn, NameIn
from app.core.config import settings
from app.services import auth_service as service
from app.services import profile_service
from app.services.session_service import USER

router = APIRouter(prefix="/auth", tags=["Auth"])


def _cookie_path() -> str:
    return f"{settings.api_prefix_normalized}{router.prefix}"


@router.post(
    "/otp/request",
    response_model=SentOut,
    dependencies=[Depends(otp_rate_limit)],
    summary="Pedir OTP",
    description="Genera un código de 6 dígitos (3 minutos) y lo envía por correo.",
)
def request_otp(payload: OtpRequestPayload) -> SentOut:
    service.request_otp(payload.email)
    return SentOut(sent=True)


@router.post(
    "/otp/verify",
    response_model=AccessOut,
    summary="Verificar OTP e iniciar sesión",
)
def verify_otp(payload: OtpVerifyPayload, request: Request, response: Response) -> AccessOut:
    ip, ua = client_info(request)
    pair = service.verify_otp(email=payload.email, code=payload.code, ip=ip, user_agent=ua)
    set_refresh_cookie(response, pair.refresh, _cookie_path())
    return AccessOut(access=pair.access)


@router.post(
    "/refresh",
    response_model=AccessOut,
    summary="Rotar refresh token",
    description="Rota el refresh de la cookie (un solo uso) y emite un nuevo access token.",
)
def refresh(request: Request, response: Response) -> AccessOut:
    ip, ua = client_info(request)
    pair = service.refresh(read_refresh_cookie(request), audience=USER, ip=ip, user_agent=ua)
    set_refresh_cookie(response, pair.refresh, _cookie_path())
    return AccessOut(access=pair.access)


@router.post("/logout", response_model=LoggedOutOut, summary="Cerrar sesión")
def logout(request: Request, response: Response) -> LoggedOutOut:
    service.logout(read_refresh_cookie(request))
    clear_refresh_cookie(response, _cookie_path())
    return LoggedOutOut(logged_out=True)


@router.post("/logout-all", response_model=RevokedOut, summary="Cerrar todas las sesiones")
def logout_all(response: Response, user_id: str = Depends(require_user)) -> RevokedOut:
    n = service.logout_everywhere(user_id, USER)
    clear_refresh_cookie(response, _cookie_path())
    return RevokedOut(revoked=n)


@router.delete(
    "/account",
    response_model=DeletedOut,
    summary="Borrar cuenta",
    description="Soft delete del usuario y revocación de todas sus sesiones.",
)
def delete_account(response: Response, user_id: str = Depends(require_user)) -> DeletedOut:
    service.delete_account(user_id)
    clear_refresh_cookie(response, _cookie_path())
    return DeletedOut(deleted=True)


# === Perfil: un bloque CRUD por campo ===

def _field_routes(field: str, schema: type) -> None:
    @router.post(f"/profile/{field}", response_model=dict, status_code=status.HTTP_201_CREATED, summary=f"Crear {field}")
    def create(payload: schema, user_id: str = Depends(require_user)) -> dict:
        return {field: profile_service.create_user_field(user_id, field, getattr(payload, field))}

    @router.get(f"/profile/{field}", response_model=dict, summary=f"Leer {field}")
    def read(user_id: str = Depends(require_user)) -> dict:
        return {field: profile_service.read_user_field(user_id, field)}

    @router.put(f"/profile/{field}", response_model=dict, summary=f"Reemplazar {field}")
    def update(payload: schema, user_id: str = Depends(require_user)) -> dict:
        return {field: profile_service.update_user_field(user_id, field, getattr(payload, field))}

    @router.delete(f"/profile/{field}", response_model=dict, summary=f"Borrar {field}")
    def delete(user_id: str = Depends(require_user)) -> dict:
        return {field: profile_service.delete_user_field(user_id, field)}


_field_routes("name", NameIn)
_field_routes("mobile", MobileIn)
_field_routes("address", AddressIn)

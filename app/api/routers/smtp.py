"""
Endpoints de configuración SMTP (solo admin).

El password se cifra antes de guardarse y las lecturas lo devuelven enmascarado.
"""
from fastapi import APIRouter, Depends, status

from app.api.deps import require_admin
from app.api.schemas.smtp import (
    SmtpConfigCreate,
    SmtpConfigOut,
    SmtpConfigRead,
    SmtpConfigUpdate,
    SmtpCreatedOut,
    SmtpDeletedOut,
    SmtpUpdatedOut,
)
from app.services import smtp_service

router = APIRouter(prefix="/admin/smtp", tags=["SMTP"])


@router.post("", response_model=SmtpCreatedOut, status_code=status.HTTP_201_CREATED, summary="Crear configuración SMTP")
def create(payload: SmtpConfigCreate, admin_email: str = Depends(require_admin)) -> SmtpCreatedOut:
    cid = smtp_service.create_config(
        host=payload.host,
        port=payload.port,
        username=payload.username,
        password=payload.password,
        actor=admin_email,
    )
    return SmtpCreatedOut(id=cid)


@router.get("", response_model=SmtpConfigRead, summary="Configuración SMTP activa")
def read(_admin: str = Depends(require_admin)) -> SmtpConfigRead:
    cfg = smtp_service.read_config()
    return SmtpConfigRead(config=SmtpConfigOut(**cfg) if cfg else None)


@router.put("/{config_id}", response_model=SmtpUpdatedOut, summary="Actualizar configuración SMTP")
def update(config_id: str, payload: SmtpConfigUpdate, admin_email: str = Depends(require_admin)) -> SmtpUpdatedOut:
    smtp_service.update_config(config_id, payload.model_dump(exclude_none=True), actor=admin_email)
    return SmtpUpdatedOut(updated=True)


@router.delete("/{config_id}", response_model=SmtpDeletedOut, summary="Borrar configuración SMTP")
def delete(config_id: str, _admin: str = Depends(require_admin)) -> SmtpDeletedOut:
    smtp_service.delete_config(config_id)
    return SmtpDeletedOut(deleted=True)

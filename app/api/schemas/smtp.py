"""Esquemas de la configuración SMTP (el password nunca sale en claro)."""
from typing import Optional

from pydantic import BaseModel, Field


class SmtpConfigCreate(BaseModel):
    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SmtpConfigUpdate(BaseModel):
    host: Optional[str] = Field(default=None, min_length=1)
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    username: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = Field(default=None, min_length=1)


class SmtpConfigOut(BaseModel):
    id: str
    host: str
    port: int
    username: str
    password: str = "****"


class SmtpConfigRead(BaseModel):
    config: Optional[SmtpConfigOut] = None


class SmtpCreatedOut(BaseModel):
    id: str


class SmtpUpdatedOut(BaseModel):
    updated: bool


class SmtpDeletedOut(BaseModel):
    deleted: bool

"""
Esquemas Pydantic para operaciones de autenticación.

- Email siempre normalizado a minúsculas.
- El refresh token viaja en cookie HTTP-only; el body solo devuelve el access token.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator


class AdminLoginPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: EmailStr) -> str:
        return str(v).strip().lower()


class OtpRequestPayload(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: EmailStr) -> str:
        return str(v).strip().lower()


class OtpVerifyPayload(BaseModel):
    email: EmailStr
    code: str = Field(min_length=1, max_length=12)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: EmailStr) -> str:
        return str(v).strip().lower()

    @field_validator("code")
    @classmethod
    def _strip_code(cls, v: str) -> str:
        return v.strip()


# === Response models ===

class AccessOut(BaseModel):
    access: str
    token_type: str = "bearer"


class SentOut(BaseModel):
    sent: bool


class LoggedOutOut(BaseModel):
    logged_out: bool


class RevokedOut(BaseModel):
    revoked: int


class DeletedOut(BaseModel):
    deleted: bool

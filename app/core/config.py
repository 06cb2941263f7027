"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, Auth/JWT, Cifrado, OTP, Cookies, Email.
"""
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Quill API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = False

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "quill_db"
    mongo_tls: bool = False
    mongo_tls_insecure: bool = False  # solo dev

    # Admin (único, configurado por entorno)
    admin_email: str | None = None
    admin_password: str | None = None

    # Auth / JWT: secretos separados para access y refresh
    jwt_access_secret: str | None = None
    jwt_refresh_secret: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 14
    # Si un refresh ya rotado se reutiliza, revoca todas las sesiones del sujeto
    refresh_reuse_revokes_all: bool = False

    # Cifrado de secretos en reposo (password SMTP)
    encryption_key: str | None = None
    encryption_kdf_iterations: int = 200_000

    # Hash de códigos OTP (argon2id)
    secret_hash_time_cost: int = 2
    secret_hash_memory_cost: int = 51200
    secret_hash_parallelism: int = 2

    # OTP
    otp_expire_minutes: int = 3
    otp_max_attempts: int = 5
    otp_rate_limit_max: int = 6
    otp_rate_limit_window_seconds: int = 180

    # Cookie del refresh token
    refresh_cookie_name: str = "rt"
    cookie_secure: bool = True
    cookie_samesite: str = "strict"
    cookie_domain: str | None = None

    # Email
    smtp_from_name: str = "Quill"
    smtp_timeout_seconds: int = 20

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def refresh_cookie_max_age(self) -> int:
        return self.refresh_token_expire_days * 24 * 60 * 60

    def missing_required(self) -> List[str]:
        """Variables obligatorias que no están definidas (nombres en mayúsculas)."""
        required = {
            "MONGO_URI": self.mongo_uri,
            "JWT_ACCESS_SECRET": self.jwt_access_secret,
            "JWT_REFRESH_SECRET": self.jwt_refresh_secret,
            "ENCRYPTION_KEY": self.encryption_key,
            "ADMIN_EMAIL": self.admin_email,
            "ADMIN_PASSWORD": self.admin_password,
        }
        return [name for name, value in required.items() if not value]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
    )


settings = Settings()

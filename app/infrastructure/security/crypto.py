"""
Primitivas de protección de credenciales.

- Hash lento con sal (argon2id) para códigos OTP: `hash_secret` / `verify_secret`.
- Cifrado simétrico autenticado (AES-256-GCM) para secretos en reposo, como el
  password SMTP: `encrypt` / `decrypt`. Formato del sobre: "ivBase64:cipherBase64".
"""
from __future__ import annotations

import base64
import binascii
import os
from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from app.core.config import settings
from app.core.exceptions import DecryptionError

KEY_LEN = 32  # AES-256
IV_LEN = 12  # nonce recomendado para GCM
SEPARATOR = ":"
# Sal fija de la aplicación: la clave se deriva una vez por proceso
KDF_SALT = b"quill.secret-at-rest.v1"


@lru_cache(maxsize=1)
def _hasher() -> PasswordHasher:
    return PasswordHasher(
        time_cost=settings.secret_hash_time_cost,
        memory_cost=settings.secret_hash_memory_cost,
        parallelism=settings.secret_hash_parallelism,
        hash_len=32,
        salt_len=16,
        type=Type.ID,
    )


def hash_secret(plaintext: str) -> str:
    """Hash argon2id auto-descriptivo (algoritmo, parámetros y sal embebidos)."""
    return _hasher().hash(plaintext)


def verify_secret(plaintext: str, hashed: str) -> bool:
    """Compara en tiempo constante; un hash mal formado devuelve False."""
    if not hashed:
        return False
    try:
        return _hasher().verify(hashed, plaintext)
    except (VerificationError, InvalidHashError):
        return False


def derive_key(passphrase: str, iterations: int | None = None) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LEN,
        salt=KDF_SALT,
        iterations=iterations or settings.encryption_kdf_iterations,
    )
    return kdf.derive(passphrase.encode("utf-8"))


@lru_cache(maxsize=4)
def _configured_key(passphrase: str) -> bytes:
    return derive_key(passphrase)


def default_key() -> bytes:
    """Clave derivada de ENCRYPTION_KEY (cacheada por proceso)."""
    if not settings.encryption_key:
        raise RuntimeError("ENCRYPTION_KEY no configurada")
    return _configured_key(settings.encryption_key)


def encrypt(plaintext: str, key: bytes | None = None) -> str:
    key = key or default_key()
    iv = os.urandom(IV_LEN)
    data = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    return f"{base64.b64encode(iv).decode('ascii')}{SEPARATOR}{base64.b64encode(data).decode('ascii')}"


def decrypt(envelope: str, key: bytes | None = None) -> str:
    """Descifra un sobre de `encrypt`. Cualquier alteración o clave errónea -> DecryptionError."""
    key = key or default_key()
    parts = (envelope or "").split(SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise DecryptionError("Sobre cifrado mal formado")
    try:
        iv = base64.b64decode(parts[0], validate=True)
        data = base64.b64decode(parts[1], validate=True)
    except (binascii.Error, ValueError):
        raise DecryptionError("Sobre cifrado mal formado") from None
    if len(iv) != IV_LEN:
        raise DecryptionError("Sobre cifrado mal formado")
    try:
        plain = AESGCM(key).decrypt(iv, data, None)
    except (InvalidTag, ValueError):
        # ValueError: clave de longitud inválida para AES
        raise DecryptionError() from None
    try:
        return plain.decode("utf-8")
    except UnicodeDecodeError:
        raise DecryptionError() from None

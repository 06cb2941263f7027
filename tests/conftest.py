import os

# Settings se leen al importar app.core.config: definir el entorno antes de importar la app.
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789abcdef0123")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef012")
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-passphrase")
os.environ.setdefault("ENCRYPTION_KDF_ITERATIONS", "1000")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin-password-123")
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("COOKIE_SECURE", "false")
# argon2 barato en tests
os.environ.setdefault("SECRET_HASH_TIME_COST", "1")
os.environ.setdefault("SECRET_HASH_MEMORY_COST", "1024")
os.environ.setdefault("SECRET_HASH_PARALLELISM", "1")

import threading
from typing import Dict, List

import mongomock
import mongomock.collection
import pytest
from fastapi.testclient import TestClient

from app.core import config as app_config
from app.infrastructure.db import mongo
from app.infrastructure.email import email_client
from app.services import smtp_service

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]

@pytest.fixture()
def db():
    """Base mongomock nueva por test."""
    database = mongomock.MongoClient()["quill_test"]
    mongo.use_database(database)
    try:
        yield database
    finally:
        mongo.close_mongo()

@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """Restaura los settings que algunos tests modifican."""
    keys = ["refresh_reuse_revokes_all", "otp_max_attempts", "refresh_token_expire_days"]
    saved = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in saved.items():
            setattr(app_config.settings, k, v)

@pytest.fixture()
def client(db):
    from app.main import app

    with TestClient(app) as c:
        yield c

@pytest.fixture()
def outbox(monkeypatch) -> List[Dict[str, str]]:
    """Captura los correos en lugar de abrir una conexión SMTP."""
    sent: List[Dict[str, str]] = []

    def _fake_send(self, to_email, subject, html_body, text_body=None):
        sent.append(
            {
                "to": to_email,
                "subject": subject,
                "html": html_body,
                "password": self.password,
            }
        )

    monkeypatch.setattr(email_client.SmtpTransport, "send", _fake_send)
    return sent

@pytest.fixture()
def smtp_configured(db):
    return smtp_service.create_config(
        host="smtp.example.com",
        port=587,
        username="mailer@example.com",
        password="smtp-secret",
        actor=ADMIN_EMAIL,
    )

@pytest.fixture()
def atomic_find_and_modify(db, monkeypatch):
    """mongomock no serializa find_and_modify entre hilos; Mongo sí es atómico por documento."""
    lock = threading.Lock()
    base = mongomock.collection.Collection._find_and_modify

    def _locked(self, *args, **kwargs):
        with lock:
            return base(self, *args, **kwargs)

    monkeypatch.setattr(mongomock.collection.Collection, "_find_and_modify", _locked)
    return db

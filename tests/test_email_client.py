from __future__ import annotations

from typing import Any, Dict, List

import pytest

from app.core.exceptions import NotConfigured
from app.infrastructure.email import email_client
from app.infrastructure.email.email_client import SmtpTransport


class _FakeSMTP:
    calls: List[Dict[str, Any]] = []

    def __init__(self, host, port, timeout=None):
        self.record: Dict[str, Any] = {"cls": type(self).__name__, "host": host, "port": port, "steps": []}
        _FakeSMTP.calls.append(self.record)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        self.record["steps"].append("ehlo")

    def has_extn(self, name):
        return name == "starttls"

    def starttls(self):
        self.record["steps"].append("starttls")

    def login(self, user, password):
        self.record["steps"].append(("login", user, password))

    def send_message(self, msg):
        self.record["msg"] = msg


class _FakeSMTPSSL(_FakeSMTP):
    pass


@pytest.fixture()
def fake_smtp(monkeypatch):
    _FakeSMTP.calls = []
    monkeypatch.setattr(email_client.smtplib, "SMTP", _FakeSMTP)
    monkeypatch.setattr(email_client.smtplib, "SMTP_SSL", _FakeSMTPSSL)
    return _FakeSMTP.calls


def test_starttls_on_submission_port(fake_smtp):
    SmtpTransport("smtp.example.com", 587, "mailer@example.com", "pw").send("to@example.com", "Hola", "<p>hola</p>")

    (call,) = fake_smtp
    assert call["cls"] == "_FakeSMTP"
    assert call["steps"][:2] == ["ehlo", "starttls"]
    assert ("login", "mailer@example.com", "pw") in call["steps"]
    assert call["msg"]["To"] == "to@example.com"
    assert call["msg"]["Subject"] == "Hola"


def test_implicit_tls_on_465(fake_smtp):
    SmtpTransport("smtp.example.com", 465, "mailer@example.com", "pw").send("to@example.com", "Hola", "<p>hola</p>")

    (call,) = fake_smtp
    assert call["cls"] == "_FakeSMTPSSL"
    assert "starttls" not in call["steps"]


def test_transport_repr_hides_password():
    assert "pw-secreto" not in repr(SmtpTransport("h", 25, "u", "pw-secreto"))


def test_send_without_config(db):
    with pytest.raises(NotConfigured):
        email_client.send_otp_email("to@example.com", "123456", 3)


def test_send_otp_email_uses_decrypted_password(db, smtp_configured, fake_smtp):
    email_client.send_otp_email("to@example.com", "042042", 3)

    (call,) = fake_smtp
    assert ("login", "mailer@example.com", "smtp-secret") in call["steps"]
    html = call["msg"].get_body(preferencelist=("html",)).get_content()
    assert ">042042<" in html

"""
Envío de correos (SMTP) con la configuración guardada por el admin.

El password se descifra justo antes de conectar y no se guarda en memoria
más allá de la llamada.
"""
import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Any, Dict

from app.core.config import settings
from app.core.exceptions import NotConfigured
from app.infrastructure.security.crypto import decrypt
from app.repositories import smtp_repo

_log = logging.getLogger("quill.email")

SSL_PORT = 465


@dataclass(frozen=True)
class SmtpTransport:
    host: str
    port: int
    username: str
    password: str = field(repr=False)

    def send(self, to_email: str, subject: str, html_body: str, text_body: str | None = None) -> None:
        msg = EmailMessage()
        msg["From"] = f"{settings.smtp_from_name} <{self.username}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(text_body or "Abre este correo en un cliente compatible con HTML.")
        msg.add_alternative(html_body, subtype="html")

        timeout = settings.smtp_timeout_seconds
        # 465 => TLS implícito; el resto usa STARTTLS si el servidor lo ofrece
        if self.port == SSL_PORT:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=timeout) as server:
                server.login(self.username, self.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=timeout) as server:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls()
                    server.ehlo()
                server.login(self.username, self.password)
                server.send_message(msg)


def transport_from_config(cfg: Dict[str, Any]) -> SmtpTransport:
    return SmtpTransport(
        host=cfg["host"],
        port=int(cfg["port"]),
        username=cfg["username"],
        password=decrypt(cfg["password_enc"]),
    )


def get_transport() -> SmtpTransport:
    """Transporte construido con la configuración SMTP más reciente."""
    cfg = smtp_repo.get_latest()
    if not cfg:
        raise NotConfigured()
    return transport_from_config(cfg)


def send_email(to_email: str, subject: str, html_body: str, text_body: str | None = None) -> None:
    get_transport().send(to_email, subject, html_body, text_body)
    _log.info("email sent to=%s subject=%s", to_email, subject)


def send_otp_email(to_email: str, code: str, expires_in_minutes: int) -> None:
    subject = "Tu código de acceso"
    html = f"""
    <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="background:#f7f7f8;padding:24px 0;font-family:system-ui,-apple-system,Segoe UI,Roboto,sans-serif;color:#111">
      <tr>
        <td align="center">
          <table role="presentation" width="560" cellpadding="0" cellspacing="0" style="background:#fff;border-radius:12px;border:1px solid #e6e6e7;padding:24px">
            <tr><td>
              <h2 style="margin:0 0 8px;font-size:20px;color:#111">Tu código de acceso</h2>
              <div style="display:inline-block;font-size:28px;letter-spacing:4px;font-weight:700;background:#111;color:#fff;padding:12px 16px;border-radius:8px">{code}</div>
              <p style="margin:16px 0 0;color:#555">Válido por <b>{expires_in_minutes} minutos</b>. Si no lo pediste, ignora este mensaje.</p>
            </td></tr>
          </table>
        </td>
      </tr>
    </table>
    """
    text = f"Tu código de acceso es: {code}. Válido por {expires_in_minutes} minutos."
    send_email(to_email, subject, html, text)

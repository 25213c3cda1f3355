"""
Mailbox relay: contact messages from the storefront are forwarded to the
vendor's contact e-mail through the configured transport (smtp or mailgun).
"""
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

import jinja2
import requests

from ..utils.errors import ApiError
from ..utils.logger import Log


class EmailSendError(ApiError):
    """Callers only ever see `default_message`; `detail` is for the log."""
    status_code = "INTERNAL_SERVER_ERROR"
    default_message = "mail delivery failed"

    def __init__(self, detail=None):
        self.detail = detail
        super().__init__()


@dataclass
class MailboxMessage:
    to: str
    subject: str
    body: str
    reply_to: Optional[str] = None


# ---------- Template ----------

MAILBOX_TEMPLATE = """\
Hai una nuova richiesta di contatto!

{{ text }}

Informazioni del Contatto:
Nome: {{ name }}
Cognome: {{ lastname }}
Email: {{ email }}
{% if phone %}Telefono: {{ phone }}
{% endif %}"""

_templates = jinja2.Environment(
    loader=jinja2.DictLoader({"mailbox.txt": MAILBOX_TEMPLATE}),
    autoescape=False,
    keep_trailing_newline=True,
)


def render_mailbox_text(**context) -> str:
    return _templates.get_template("mailbox.txt").render(**context)


# ---------- Transports ----------

class SmtpTransport:
    def __init__(self, config):
        self.host = config.get("SMTP_HOST")
        self.port = int(config.get("SMTP_PORT", 587))
        self.username = config.get("SMTP_USERNAME")
        self.password = config.get("SMTP_PASSWORD")
        self.use_tls = bool(config.get("SMTP_USE_TLS", True))
        self.sender = f"{config.get('MAIL_NAME')} <{config.get('SENDER_EMAIL')}>"
        if not self.host:
            raise EmailSendError("SMTP_HOST is not configured")

    def deliver(self, message: MailboxMessage):
        mail = EmailMessage()
        mail["From"] = self.sender
        mail["To"] = message.to
        mail["Subject"] = message.subject
        if message.reply_to:
            mail["Reply-To"] = message.reply_to
        mail.set_content(message.body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=20) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(mail)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailSendError(f"smtp delivery failed: {e}") from e


class MailgunTransport:
    def __init__(self, config):
        self.api_key = config.get("MAILGUN_API_KEY")
        self.domain = config.get("MAILGUN_DOMAIN")
        self.api_host = config.get("MAILGUN_API_HOST", "api.mailgun.net")
        self.sender = f"{config.get('MAIL_NAME')} <{config.get('SENDER_EMAIL')}>"
        if not self.api_key or not self.domain:
            raise EmailSendError("MAILGUN_API_KEY / MAILGUN_DOMAIN are not configured")

    def deliver(self, message: MailboxMessage):
        data = {
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "text": message.body,
        }
        if message.reply_to:
            data["h:Reply-To"] = message.reply_to

        try:
            resp = requests.post(
                f"https://{self.api_host}/v3/{self.domain}/messages",
                auth=("api", self.api_key),
                data=data,
                timeout=20,
            )
        except requests.RequestException as e:
            raise EmailSendError(f"mailgun request failed: {e}") from e

        if resp.status_code >= 400:
            raise EmailSendError(f"mailgun answered {resp.status_code}")


TRANSPORTS = {
    "smtp": SmtpTransport,
    "mailgun": MailgunTransport,
}


# ---------- Service ----------

class EmailService:

    def __init__(self):
        self.config = {}

    def init_app(self, app):
        self.config = app.config
        app.extensions["email_service"] = self

    def _transport(self):
        provider = (self.config.get("EMAIL_PROVIDER") or "smtp").lower()
        if provider not in TRANSPORTS:
            raise EmailSendError(f"unknown EMAIL_PROVIDER: {provider}")
        return TRANSPORTS[provider](self.config)

    def send_to_mailbox(self, vendor, name, lastname, email, text, phone=None):
        """Relay a contact message to the vendor's contact e-mail."""
        contact = vendor.get("contact") or {}
        if not contact.get("email"):
            Log.error(f"[email_service.py][send_to_mailbox] vendor {vendor.get('_id')} has no contact email")
            raise EmailSendError("vendor has no contact email")

        message = MailboxMessage(
            to=contact["email"],
            subject=f"info@{contact.get('shopname') or ''}",
            body=render_mailbox_text(name=name, lastname=lastname, email=email, text=text, phone=phone),
            reply_to=email,
        )
        try:
            self._transport().deliver(message)
        except EmailSendError as e:
            Log.error(f"[email_service.py][send_to_mailbox] vendor {vendor.get('_id')}: {e.detail}")
            raise
        Log.info(f"[email_service.py][send_to_mailbox] relayed to vendor {vendor.get('_id')}")
        return message


email_service = EmailService()

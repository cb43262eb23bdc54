"""SMTP transport authenticating with a username/password pair."""

from __future__ import annotations

import asyncio
import logging
import smtplib
import socket
from dataclasses import dataclass
from email.message import EmailMessage
from typing import ClassVar

from reservation_mailer.app.core.errors import AUTH_FAILED, HOST_NOT_FOUND, DeliveryError
from reservation_mailer.app.services.mail.base import OutgoingEmail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpServer:
    host: str
    port: int
    use_ssl: bool


# Provider names accepted in EMAIL_SERVICE.
WELL_KNOWN_SERVICES: dict[str, SmtpServer] = {
    "gmail": SmtpServer("smtp.gmail.com", 465, True),
    "googlemail": SmtpServer("smtp.gmail.com", 465, True),
    "outlook": SmtpServer("smtp-mail.outlook.com", 587, False),
    "hotmail": SmtpServer("smtp-mail.outlook.com", 587, False),
    "outlook365": SmtpServer("smtp.office365.com", 587, False),
    "yahoo": SmtpServer("smtp.mail.yahoo.com", 465, True),
    "icloud": SmtpServer("smtp.mail.me.com", 587, False),
    "zoho": SmtpServer("smtp.zoho.com", 465, True),
    "fastmail": SmtpServer("smtp.fastmail.com", 465, True),
    "mailgun": SmtpServer("smtp.mailgun.org", 465, True),
    "sendgrid": SmtpServer("smtp.sendgrid.net", 587, False),
}


def resolve_smtp_server(
    service: str | None,
    *,
    host: str | None = None,
    port: int | None = None,
    use_ssl: bool | None = None,
) -> SmtpServer | None:
    """Pick the SMTP server from an explicit host or a well-known service name."""
    if host:
        port = port or (465 if use_ssl else 587)
        return SmtpServer(host, port, use_ssl if use_ssl is not None else port == 465)

    known = WELL_KNOWN_SERVICES.get((service or "").strip().lower())
    if known is None:
        return None
    return SmtpServer(
        known.host,
        port or known.port,
        use_ssl if use_ssl is not None else known.use_ssl,
    )


class SmtpBackend:
    """Deliver messages through an authenticated SMTP session per message."""

    name: ClassVar[str] = "smtp"
    checks_email_shape: ClassVar[bool] = True

    def __init__(self, server: SmtpServer, username: str, password: str) -> None:
        self._server = server
        self._username = username
        self._password = password

    async def send(self, message: OutgoingEmail) -> None:
        await asyncio.to_thread(self._send_sync, message)

    def _build(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = message.sender
        msg["To"] = message.to
        msg.set_content(message.html, subtype="html")
        return msg

    def _send_sync(self, message: OutgoingEmail) -> None:
        msg = self._build(message)
        server = self._server
        try:
            if server.use_ssl:
                smtp = smtplib.SMTP_SSL(host=server.host, port=server.port)
            else:
                smtp = smtplib.SMTP(host=server.host, port=server.port)
            with smtp:
                if not server.use_ssl:
                    smtp.starttls()
                smtp.login(self._username, self._password)
                smtp.send_message(msg)
        # SMTPException subclasses OSError, so the SMTP cases go first.
        except smtplib.SMTPAuthenticationError as exc:
            raise DeliveryError(AUTH_FAILED, str(exc)) from exc
        except (smtplib.SMTPRecipientsRefused, smtplib.SMTPSenderRefused) as exc:
            raise DeliveryError("EENVELOPE", str(exc)) from exc
        except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as exc:
            raise DeliveryError("ECONNECTION", str(exc)) from exc
        except smtplib.SMTPException as exc:
            raise DeliveryError("EMESSAGE", str(exc)) from exc
        except socket.gaierror as exc:
            raise DeliveryError(HOST_NOT_FOUND, str(exc)) from exc
        except TimeoutError as exc:
            raise DeliveryError("ETIMEDOUT", str(exc)) from exc
        except OSError as exc:
            raise DeliveryError("ECONNECTION", str(exc)) from exc

        logger.debug("SMTP message accepted by %s for %s", server.host, message.to)

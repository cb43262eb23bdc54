"""SendGrid v3 API backend authenticating with a bearer API key."""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import Any, ClassVar
from urllib.error import URLError

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Content, Email, Mail, ReplyTo, To

from reservation_mailer.app.core.errors import AUTH_FAILED, HOST_NOT_FOUND, DeliveryError
from reservation_mailer.app.services.mail.base import OutgoingEmail

logger = logging.getLogger(__name__)

ACCEPTED_STATUS_CODES = (200, 201, 202)


class SendGridBackend:
    """Send through the SendGrid API from a fixed, verified sender address.

    The visible sender name is kept from the message; the original sender
    address becomes the reply-to so replies still reach the restaurant.
    """

    name: ClassVar[str] = "sendgrid"
    checks_email_shape: ClassVar[bool] = False

    def __init__(self, api_key: str, from_email: str, client: Any | None = None) -> None:
        self._from_email = from_email
        self._client = client or SendGridAPIClient(api_key=api_key)

    async def send(self, message: OutgoingEmail) -> None:
        await asyncio.to_thread(self._send_sync, message)

    def _build(self, message: OutgoingEmail) -> Mail:
        mail = Mail(
            from_email=Email(self._from_email, message.sender_name),
            to_emails=To(message.to),
            subject=message.subject,
            html_content=Content("text/html", message.html),
        )
        mail.reply_to = ReplyTo(message.sender_address)
        return mail

    def _send_sync(self, message: OutgoingEmail) -> None:
        try:
            response = self._client.send(self._build(message))
        except HTTPError as exc:
            code = AUTH_FAILED if exc.status_code in (401, 403) else "EAPI"
            raise DeliveryError(code, f"SendGrid returned {exc.status_code}: {exc.body!r}") from exc
        except URLError as exc:
            code = HOST_NOT_FOUND if isinstance(exc.reason, socket.gaierror) else "ECONNECTION"
            raise DeliveryError(code, str(exc.reason)) from exc

        if response.status_code not in ACCEPTED_STATUS_CODES:
            raise DeliveryError(
                "EAPI",
                f"SendGrid returned status code {response.status_code}: {response.body!r}",
            )
        logger.debug("SendGrid accepted message for %s (status %s)", message.to, response.status_code)

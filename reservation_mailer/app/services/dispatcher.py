"""Send the operator notice and the customer confirmation for one reservation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from reservation_mailer.app.core.config import Settings
from reservation_mailer.app.core.errors import (
    EMAIL_SERVICE_MESSAGE,
    ConfigurationError,
    DeliveryError,
)
from reservation_mailer.app.routers.schemas import ReservationRequest
from reservation_mailer.app.services.mail.base import MailBackend
from reservation_mailer.app.services.mail.sendgrid_api import SendGridBackend
from reservation_mailer.app.services.mail.smtp import SmtpBackend, SmtpServer, resolve_smtp_server
from reservation_mailer.app.services.templates import RestaurantProfile, render_notifications

logger = logging.getLogger(__name__)

OPERATOR_NOTICE = "operator_notice"
CUSTOMER_CONFIRMATION = "customer_confirmation"

BACKENDS: dict[str, type[SmtpBackend] | type[SendGridBackend]] = {
    SmtpBackend.name: SmtpBackend,
    SendGridBackend.name: SendGridBackend,
}


@dataclass(frozen=True)
class SmtpCredentials:
    server: SmtpServer
    username: str
    password: str


@dataclass(frozen=True)
class SendGridCredentials:
    api_key: str
    from_email: str


@dataclass(frozen=True)
class DispatchConfig:
    operator_email: str
    backend: str
    restaurant: RestaurantProfile
    smtp: SmtpCredentials | None = None
    sendgrid: SendGridCredentials | None = None


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of the two-step send.

    ``delivered`` lists the steps the backend accepted, in order. A failure
    after the operator notice went out is ``partial``.
    """

    delivered: tuple[str, ...] = ()
    failed_step: str | None = None
    error: DeliveryError | None = None

    @property
    def sent(self) -> bool:
        return self.error is None

    @property
    def partial(self) -> bool:
        return self.error is not None and bool(self.delivered)


def requires_email_check(settings: Settings) -> bool:
    """Whether submissions get the email-shape check under these settings."""
    if settings.STRICT_EMAIL_VALIDATION is not None:
        return settings.STRICT_EMAIL_VALIDATION
    backend = BACKENDS.get(settings.EMAIL_BACKEND)
    return backend.checks_email_shape if backend is not None else True


def resolve_dispatch_config(settings: Settings) -> DispatchConfig:
    """Collect everything a dispatch needs, failing before any network call."""
    operator_email = (settings.RESTAURANT_EMAIL or "").strip()
    if not operator_email:
        raise ConfigurationError("RESTAURANT_EMAIL is not set")

    restaurant = RestaurantProfile(
        name=settings.RESTAURANT_NAME,
        phone=settings.RESTAURANT_PHONE,
        address=settings.RESTAURANT_ADDRESS,
    )

    if settings.EMAIL_BACKEND == SmtpBackend.name:
        password = settings.EMAIL_PASSWORD
        if not password:
            raise ConfigurationError("EMAIL_PASSWORD is not set")
        server = resolve_smtp_server(
            settings.EMAIL_SERVICE,
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            use_ssl=settings.SMTP_USE_SSL,
        )
        if server is None:
            raise ConfigurationError(
                f"Unknown EMAIL_SERVICE {settings.EMAIL_SERVICE!r} and no SMTP_HOST set"
            )
        return DispatchConfig(
            operator_email=operator_email,
            backend=SmtpBackend.name,
            restaurant=restaurant,
            smtp=SmtpCredentials(
                server=server,
                username=settings.EMAIL_USER or operator_email,
                password=password,
            ),
        )

    if settings.EMAIL_BACKEND == SendGridBackend.name:
        if not settings.SENDGRID_API_KEY:
            raise ConfigurationError("SENDGRID_API_KEY is not set", EMAIL_SERVICE_MESSAGE)
        return DispatchConfig(
            operator_email=operator_email,
            backend=SendGridBackend.name,
            restaurant=restaurant,
            sendgrid=SendGridCredentials(
                api_key=settings.SENDGRID_API_KEY,
                from_email=settings.SENDGRID_FROM_EMAIL,
            ),
        )

    raise ConfigurationError(f"Unknown EMAIL_BACKEND {settings.EMAIL_BACKEND!r}")


def build_mail_backend(config: DispatchConfig) -> MailBackend:
    if config.smtp is not None:
        return SmtpBackend(config.smtp.server, config.smtp.username, config.smtp.password)
    if config.sendgrid is not None:
        return SendGridBackend(config.sendgrid.api_key, config.sendgrid.from_email)
    raise ConfigurationError(f"No credentials resolved for backend {config.backend!r}")


async def dispatch(
    reservation: ReservationRequest,
    config: DispatchConfig,
    backend: MailBackend | None = None,
    *,
    submitted_at: datetime | None = None,
) -> DeliveryOutcome:
    """Send the operator notice, then the customer confirmation.

    The confirmation is only attempted once the notice was accepted. Nothing
    is rolled back when the second step fails.
    """
    backend = backend or build_mail_backend(config)
    pair = render_notifications(
        reservation,
        operator_email=config.operator_email,
        restaurant=config.restaurant,
        submitted_at=submitted_at or datetime.now(),
    )
    steps = (
        (OPERATOR_NOTICE, pair.restaurant_notice),
        (CUSTOMER_CONFIRMATION, pair.customer_confirmation),
    )

    delivered: list[str] = []
    for step, message in steps:
        try:
            await backend.send(message)
        except DeliveryError as exc:
            error = exc
        except Exception as exc:
            logger.exception("Unexpected %s backend failure during %s", config.backend, step)
            error = DeliveryError(None, str(exc))
        else:
            delivered.append(step)
            continue

        outcome = DeliveryOutcome(delivered=tuple(delivered), failed_step=step, error=error)
        if outcome.partial:
            logger.warning(
                "Reservation partially delivered for %s <%s>: %s sent, %s failed (%s)",
                reservation.name,
                reservation.email,
                ", ".join(outcome.delivered),
                step,
                error,
            )
        else:
            logger.error(
                "Error processing reservation for %s <%s>: %s failed (%s)",
                reservation.name,
                reservation.email,
                step,
                error,
            )
        return outcome

    logger.info(
        "Reservation submitted: %s - %s - %s %s",
        reservation.name,
        reservation.email,
        reservation.date,
        reservation.time,
    )
    return DeliveryOutcome(delivered=tuple(delivered))

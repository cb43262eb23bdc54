import pytest

from reservation_mailer.app.core.errors import (
    EMAIL_SERVICE_MESSAGE,
    SERVER_CONFIGURATION_MESSAGE,
    ConfigurationError,
    DeliveryError,
    classify_delivery_error,
)
from reservation_mailer.app.services.dispatcher import (
    build_mail_backend,
    requires_email_check,
    resolve_dispatch_config,
)
from reservation_mailer.app.services.mail.sendgrid_api import SendGridBackend
from reservation_mailer.app.services.mail.smtp import SmtpBackend, SmtpServer, resolve_smtp_server


def test_smtp_config_uses_operator_address_as_login(settings_factory):
    config = resolve_dispatch_config(settings_factory())

    assert config.backend == "smtp"
    assert config.operator_email == "bookings@bistro.example"
    assert config.smtp.username == "bookings@bistro.example"
    assert config.smtp.password == "app-password"
    assert config.smtp.server == SmtpServer("smtp.gmail.com", 465, True)
    assert config.sendgrid is None


def test_smtp_config_explicit_user_and_host(settings_factory):
    config = resolve_dispatch_config(
        settings_factory(EMAIL_USER="mailer", SMTP_HOST="mail.bistro.example", SMTP_PORT=2525)
    )

    assert config.smtp.username == "mailer"
    assert config.smtp.server == SmtpServer("mail.bistro.example", 2525, False)


@pytest.mark.parametrize(
    "overrides",
    [
        {"RESTAURANT_EMAIL": None},
        {"RESTAURANT_EMAIL": "  "},
        {"EMAIL_PASSWORD": None},
        {"EMAIL_SERVICE": "carrier-pigeon"},
        {"EMAIL_BACKEND": "fax"},
    ],
)
def test_missing_configuration_uses_generic_message(settings_factory, overrides):
    with pytest.raises(ConfigurationError) as excinfo:
        resolve_dispatch_config(settings_factory(**overrides))

    assert excinfo.value.public_message == SERVER_CONFIGURATION_MESSAGE


def test_sendgrid_config(settings_factory):
    config = resolve_dispatch_config(
        settings_factory(
            EMAIL_BACKEND="SendGrid",
            EMAIL_PASSWORD=None,
            SENDGRID_API_KEY="SG.test",
            SENDGRID_FROM_EMAIL="no-reply@bistro.example",
        )
    )

    assert config.backend == "sendgrid"
    assert config.sendgrid.api_key == "SG.test"
    assert config.sendgrid.from_email == "no-reply@bistro.example"
    assert config.smtp is None


def test_sendgrid_missing_key(settings_factory):
    with pytest.raises(ConfigurationError) as excinfo:
        resolve_dispatch_config(settings_factory(EMAIL_BACKEND="sendgrid"))

    assert excinfo.value.public_message == EMAIL_SERVICE_MESSAGE
    assert "SENDGRID_API_KEY" in excinfo.value.problem


def test_build_mail_backend_picks_adapter(settings_factory):
    smtp = build_mail_backend(resolve_dispatch_config(settings_factory()))
    api = build_mail_backend(
        resolve_dispatch_config(settings_factory(EMAIL_BACKEND="sendgrid", SENDGRID_API_KEY="SG.test"))
    )

    assert isinstance(smtp, SmtpBackend)
    assert isinstance(api, SendGridBackend)


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({}, True),
        ({"EMAIL_BACKEND": "sendgrid"}, False),
        ({"EMAIL_BACKEND": "sendgrid", "STRICT_EMAIL_VALIDATION": True}, True),
        ({"STRICT_EMAIL_VALIDATION": False}, False),
        ({"EMAIL_BACKEND": "fax"}, True),
    ],
)
def test_requires_email_check(settings_factory, overrides, expected):
    assert requires_email_check(settings_factory(**overrides)) is expected


@pytest.mark.parametrize(
    ("service", "expected"),
    [
        ("gmail", SmtpServer("smtp.gmail.com", 465, True)),
        ("Outlook", SmtpServer("smtp-mail.outlook.com", 587, False)),
        ("unknown", None),
        (None, None),
    ],
)
def test_resolve_smtp_server(service, expected):
    assert resolve_smtp_server(service) == expected


def test_resolve_smtp_server_overrides():
    assert resolve_smtp_server("gmail", port=587, use_ssl=False) == SmtpServer("smtp.gmail.com", 587, False)
    assert resolve_smtp_server(None, host="mail.example", use_ssl=True) == SmtpServer("mail.example", 465, True)


@pytest.mark.parametrize(
    ("code", "message"),
    [
        ("EAUTH", "Email authentication failed. Please contact the restaurant."),
        ("ENOTFOUND", "Network error. Please try again later."),
        ("ECONNECTION", "Failed to process reservation"),
        (None, "Failed to process reservation"),
    ],
)
def test_classify_delivery_error(code, message):
    assert classify_delivery_error(code) == message
    assert DeliveryError(code, "raw").public_message == message


def test_development_environment_exposes_details(settings_factory):
    assert settings_factory(ENVIRONMENT="Development").expose_error_details
    assert not settings_factory().expose_error_details


def test_adapters_declare_email_shape_policy():
    assert SmtpBackend.checks_email_shape is True
    assert SendGridBackend.checks_email_shape is False

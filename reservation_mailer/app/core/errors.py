"""Error taxonomy shared by the validator, the dispatcher and the mail backends."""

AUTH_FAILED = "EAUTH"
HOST_NOT_FOUND = "ENOTFOUND"

GENERIC_DELIVERY_MESSAGE = "Failed to process reservation"
SERVER_CONFIGURATION_MESSAGE = "Server configuration error. Please contact the restaurant directly."
EMAIL_SERVICE_MESSAGE = "Email service not configured"
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"

_DELIVERY_MESSAGES = {
    AUTH_FAILED: "Email authentication failed. Please contact the restaurant.",
    HOST_NOT_FOUND: "Network error. Please try again later.",
}


class ReservationError(Exception):
    """Base class for failures surfaced to the reservation endpoint."""


class ValidationError(ReservationError):
    """Client payload is incomplete or malformed."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ConfigurationError(ReservationError):
    """Operator address, backend selection or credentials are missing.

    ``problem`` names what is missing and is only ever logged; ``public_message``
    is what the client gets to see.
    """

    def __init__(self, problem: str, public_message: str = SERVER_CONFIGURATION_MESSAGE) -> None:
        super().__init__(problem)
        self.problem = problem
        self.public_message = public_message


class DeliveryError(ReservationError):
    """A mail backend rejected a message or could not be reached."""

    def __init__(self, code: str | None, detail: str) -> None:
        super().__init__(f"{code}: {detail}" if code else detail)
        self.code = code
        self.detail = detail

    @property
    def public_message(self) -> str:
        return classify_delivery_error(self.code)


def classify_delivery_error(code: str | None) -> str:
    """Map a backend error code to the message shown to the customer."""
    return _DELIVERY_MESSAGES.get(code or "", GENERIC_DELIVERY_MESSAGE)

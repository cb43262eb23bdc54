from dataclasses import dataclass
from email.utils import formataddr
from typing import ClassVar, Protocol


@dataclass(frozen=True)
class OutgoingEmail:
    sender_name: str
    sender_address: str
    to: str
    subject: str
    html: str

    @property
    def sender(self) -> str:
        return formataddr((self.sender_name, self.sender_address))


class MailBackend(Protocol):
    """Capability to deliver one rendered email.

    ``send`` returns once the backend accepted the message and raises
    ``DeliveryError`` otherwise.
    """

    name: ClassVar[str]
    # whether submissions routed to this backend get the email-shape check
    checks_email_shape: ClassVar[bool]

    async def send(self, message: OutgoingEmail) -> None: ...

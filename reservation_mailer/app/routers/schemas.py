from pydantic import BaseModel, ConfigDict


class ReservationRequest(BaseModel):
    """Validated reservation form submission; every field is a display string."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    phone: str
    # calendar date as submitted by the form, e.g. "2024-03-01"
    date: str
    # local time-of-day, passed through verbatim
    time: str
    # compared as text ("1" -> singular), never parsed
    guests: str
    message: str


class ReservationAccepted(BaseModel):
    success: bool = True
    message: str = "Reservation submitted successfully. Confirmation email sent."


class ErrorOut(BaseModel):
    error: str
    details: str | None = None

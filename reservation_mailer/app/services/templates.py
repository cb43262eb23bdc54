"""Fixed HTML documents for the operator notice and the customer confirmation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from reservation_mailer.app.routers.schemas import ReservationRequest
from reservation_mailer.app.services.mail.base import OutgoingEmail

OPERATOR_SENDER_NAME = "Restaurant Reservations"


@dataclass(frozen=True)
class RestaurantProfile:
    name: str
    phone: str
    address: str


@dataclass(frozen=True)
class NotificationPair:
    restaurant_notice: OutgoingEmail
    customer_confirmation: OutgoingEmail


def format_reservation_date(value: str) -> str:
    """Render an ISO calendar date as e.g. "Friday, March 1, 2024".

    Values that are not ISO dates are returned unchanged.
    """
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(value).date()
        except ValueError:
            return value
    return f"{parsed:%A}, {parsed:%B} {parsed.day}, {parsed.year}"


def format_submitted_at(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


def _header_text(text: str) -> str:
    return " ".join(text.split())


def _with_line_breaks(text: str) -> str:
    return text.replace("\n", "<br>")


def _operator_notice_html(reservation: ReservationRequest, formatted_date: str, submitted_at: str) -> str:
    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2 style="color: #e67e22;">New Reservation Received</h2>
          <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h3 style="margin-top: 0;">Customer Information</h3>
            <p><strong>Name:</strong> {reservation.name}</p>
            <p><strong>Email:</strong> {reservation.email}</p>
            <p><strong>Phone:</strong> {reservation.phone}</p>
            <p><strong>Date:</strong> {formatted_date}</p>
            <p><strong>Time:</strong> {reservation.time}</p>
            <p><strong>Number of Guests:</strong> {reservation.guests}</p>
          </div>

          <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h3 style="margin-top: 0;">Order Details / Special Requests</h3>
            <p>{_with_line_breaks(reservation.message)}</p>
          </div>

          <div style="margin-top: 30px; padding-top: 20px; border-top: 2px solid #eee;">
            <p style="color: #666; font-size: 14px;">
              This reservation was submitted on {submitted_at}
            </p>
          </div>
        </div>
      """


def _customer_confirmation_html(
    reservation: ReservationRequest,
    restaurant: RestaurantProfile,
    formatted_date: str,
) -> str:
    guests_label = "person" if reservation.guests == "1" else "people"
    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
          <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #e67e22; margin: 0;">{restaurant.name}</h1>
            <p style="color: #666;">Thank you for your reservation!</p>
          </div>

          <div style="background: #f8f9fa; padding: 25px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #2c3e50; margin-top: 0;">Hello {reservation.name},</h2>
            <p style="font-size: 16px; line-height: 1.6;">
              Your reservation has been received and is being processed. We'll contact you if we need any additional information.
            </p>

            <div style="background: white; padding: 20px; border-radius: 6px; margin: 20px 0; border-left: 4px solid #e67e22;">
              <h3 style="margin-top: 0; color: #2c3e50;">Reservation Details:</h3>
              <p><strong>Date:</strong> {formatted_date}</p>
              <p><strong>Time:</strong> {reservation.time}</p>
              <p><strong>Guests:</strong> {reservation.guests} {guests_label}</p>
              <p><strong>Contact Phone:</strong> {reservation.phone}</p>
            </div>

            <div style="background: white; padding: 20px; border-radius: 6px; margin: 20px 0; border-left: 4px solid #3498db;">
              <h3 style="margin-top: 0; color: #2c3e50;">Order Summary:</h3>
              <p>{_with_line_breaks(reservation.message)}</p>
              <p style="margin-top: 15px; padding: 15px; background: #e8f4fc; border-radius: 4px;">
                <strong>Note:</strong> Hello {reservation.name}, your order has been received. Wait for a call when meals are ready.
              </p>
            </div>
          </div>

          <div style="text-align: center; margin-top: 30px; padding-top: 20px; border-top: 1px solid #eee;">
            <p style="color: #666; font-size: 14px;">
              If you need to make changes to your reservation, please call us at {restaurant.phone}
            </p>
            <p style="color: #999; font-size: 12px; margin-top: 20px;">
              {restaurant.name} • {restaurant.address}
            </p>
          </div>
        </div>
      """


def render_notifications(
    reservation: ReservationRequest,
    *,
    operator_email: str,
    restaurant: RestaurantProfile,
    submitted_at: datetime,
) -> NotificationPair:
    formatted_date = format_reservation_date(reservation.date)

    notice = OutgoingEmail(
        sender_name=OPERATOR_SENDER_NAME,
        sender_address=operator_email,
        to=operator_email,
        subject=f"New Reservation - {_header_text(reservation.name)}",
        html=_operator_notice_html(reservation, formatted_date, format_submitted_at(submitted_at)),
    )
    confirmation = OutgoingEmail(
        sender_name=restaurant.name,
        sender_address=operator_email,
        to=reservation.email,
        subject="Reservation Confirmation",
        html=_customer_confirmation_html(reservation, restaurant, formatted_date),
    )
    return NotificationPair(restaurant_notice=notice, customer_confirmation=confirmation)

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from reservation_mailer.app.core.config import Settings, get_settings
from reservation_mailer.app.core.errors import METHOD_NOT_ALLOWED_MESSAGE, ConfigurationError, ValidationError
from reservation_mailer.app.routers.schemas import ErrorOut, ReservationAccepted
from reservation_mailer.app.services.dispatcher import (
    DispatchConfig,
    build_mail_backend,
    dispatch,
    requires_email_check,
    resolve_dispatch_config,
)
from reservation_mailer.app.services.mail.base import MailBackend
from reservation_mailer.app.services.validation import validate_reservation

logger = logging.getLogger(__name__)

router = APIRouter()

BackendBuilder = Callable[[DispatchConfig], MailBackend]


def get_backend_builder() -> BackendBuilder:
    return build_mail_backend


@router.options("/reservation")
async def reservation_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@router.api_route("/reservation", methods=["GET", "PUT", "PATCH", "DELETE"])
async def reservation_method_not_allowed() -> None:
    raise HTTPException(status.HTTP_405_METHOD_NOT_ALLOWED, detail=METHOD_NOT_ALLOWED_MESSAGE)


@router.post(
    "/reservation",
    response_model=ReservationAccepted,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def submit_reservation(
    request: Request,
    settings: Settings = Depends(get_settings),
    build_backend: BackendBuilder = Depends(get_backend_builder),
) -> ReservationAccepted:
    try:
        raw = await request.json()
    except ValueError:
        raw = None

    try:
        reservation = validate_reservation(raw, check_email=requires_email_check(settings))
    except ValidationError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=exc.reason) from exc

    try:
        config = resolve_dispatch_config(settings)
    except ConfigurationError as exc:
        logger.error("Email credentials not configured: %s", exc.problem)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.public_message) from exc

    outcome = await dispatch(reservation, config, build_backend(config))
    if not outcome.sent:
        error = outcome.error
        detail = {"error": error.public_message}
        if settings.expose_error_details:
            detail["details"] = error.detail
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

    return ReservationAccepted()

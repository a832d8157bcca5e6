"""Payment route handlers (Stripe Checkout and its redirects)."""

import logging
from typing import Annotated

import stripe
from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.responses import Response

from agent.services.pending_meeting_service import AcceptOutcome
from api.dependencies import PendingMeetingServiceDep
from api.pages import render_page
from shared.stripe_client import create_checkout_session_for_meeting

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments")


@router.post("/create-checkout-session", response_model=None)
async def create_checkout_session(
    request: Request,
    event_id: Annotated[str, Form(alias="eventId", min_length=1)],
) -> Response:
    """
    Start a Stripe Checkout for the pending meeting and redirect to it.

    Returns:
        303 redirect to the hosted checkout page, or 500 if Stripe fails
    """
    try:
        session = create_checkout_session_for_meeting(event_id)
    except stripe.StripeError:
        return render_page(request, "error.html", status_code=500)

    return RedirectResponse(url=session["url"], status_code=303)


@router.get("/success", response_class=HTMLResponse)
async def payment_success(
    request: Request,
    service: PendingMeetingServiceDep,
    event_id: Annotated[str, Query(alias="eventId")],
) -> Response:
    """Payment went through: confirm the booking."""
    logger.info(f"Payment success: found eventId {event_id}", extra={"event_id": event_id})

    result = await service.accept_pending_meeting(event_id)

    if result.outcome == AcceptOutcome.CONFIRM_FAILED:
        return render_page(request, "support.html", status_code=502, event_id=event_id)

    return render_page(request, "success.html")


@router.get("/cancel", response_class=HTMLResponse)
async def payment_cancel(
    request: Request,
    service: PendingMeetingServiceDep,
    event_id: Annotated[str, Query(alias="eventId")],
) -> Response:
    """Payment was abandoned: drop the pending meeting and cancel the booking."""
    logger.info(f"Payment failure: found eventId {event_id}", extra={"event_id": event_id})

    await service.reject_pending_meeting(event_id)

    return render_page(request, "cancel.html")

"""Scheduler redirect route handler."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from starlette.responses import Response

from api.dependencies import PendingMeetingServiceDep
from api.pages import render_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling")


@router.get("/thank-you", response_class=HTMLResponse)
async def scheduling_thank_you(
    request: Request,
    service: PendingMeetingServiceDep,
    event_id: Annotated[str, Query(min_length=1)],
    page_slug: Annotated[str, Query(min_length=1)],
    edit_hash: Annotated[str, Query(min_length=1)],
) -> Response:
    """
    Receive the redirect from the scheduler after a booking.

    Stores the booking as a pending meeting and renders the checkout page,
    passing event_id along so the payment redirect can be matched to it.

    Raises:
        DuplicateKeyError: If the booking is already pending (handled by the
            application exception handler)
    """
    service.record_pending_meeting(event_id, page_slug, edit_hash)

    return render_page(request, "checkout.html", event_id=event_id)

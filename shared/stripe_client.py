"""
Stripe API client for payment processing.

This module provides the Checkout Session call used to collect payment for a
pending meeting. The event_id travels on the success and cancel redirect URLs
so the payment outcome can be matched to the booking.
"""

import logging
from typing import Any
from urllib.parse import quote

import stripe

from shared.config import get_settings

logger = logging.getLogger(__name__)


def create_checkout_session_for_meeting(event_id: str) -> dict[str, Any]:
    """
    Create a Stripe Checkout Session for a pending meeting.

    Uses an ad-hoc price_data line item so no permanent product is needed.

    Args:
        event_id: Scheduler event the payment is for

    Returns:
        dict with:
            - id: str - The Checkout Session ID
            - url: str - Hosted checkout page to redirect the customer to

    Raises:
        stripe.StripeError: If Stripe API call fails
    """
    settings = get_settings()
    base_url = settings.APP_BASE_URL.rstrip("/")
    encoded_event_id = quote(event_id, safe="")

    logger.info(
        f"Creating Stripe Checkout Session for event {event_id}, "
        f"amount: {settings.MEETING_PRICE_CENTS} {settings.MEETING_CURRENCY}",
        extra={"event_id": event_id},
    )

    try:
        session = stripe.checkout.Session.create(
            api_key=settings.STRIPE_SECRET_KEY,
            mode="payment",
            line_items=[
                {
                    "price_data": {
                        "currency": settings.MEETING_CURRENCY,
                        "product_data": {"name": settings.MEETING_PRODUCT_NAME},
                        "unit_amount": settings.MEETING_PRICE_CENTS,
                    },
                    "quantity": 1,
                }
            ],
            success_url=f"{base_url}/payments/success?eventId={encoded_event_id}",
            cancel_url=f"{base_url}/payments/cancel?eventId={encoded_event_id}",
            metadata={"event_id": event_id},
        )

    except stripe.StripeError as e:
        logger.error(
            f"Stripe API error creating checkout session for event {event_id}: {str(e)}",
            extra={"event_id": event_id},
        )
        raise

    logger.info(
        f"Checkout Session created successfully: {session.id}",
        extra={"event_id": event_id},
    )

    return {"id": session.id, "url": session.url}

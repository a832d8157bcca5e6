"""
Booking client for confirming and cancelling scheduler bookings.

This module provides the BookingClient class, which issues the two external
side effects of a pending meeting:

- confirm: asks the accept utility (a headless browser service) to open the
  scheduler confirmation URL on behalf of the organizer
- cancel: asks the Nylas API to cancel the event booked by the scheduler

Neither call retries. Failures are classified as TransportError (the service
could not be reached) or UpstreamError (the service answered with a non-200
status) and left to the caller.
"""

import logging
from urllib.parse import quote

import httpx

from database.models import PendingMeeting
from shared.config import get_settings

logger = logging.getLogger(__name__)


class BookingClientError(Exception):
    """Base class for confirm/cancel failures."""

    pass


class TransportError(BookingClientError):
    """Network failure or timeout reaching an external service."""

    pass


class UpstreamError(BookingClientError):
    """External service answered with a non-success status."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Upstream responded with HTTP {status_code}")


class BookingClient:
    """
    Client for the accept utility and the Nylas events API.

    Args:
        transport: Optional httpx transport, used by tests to intercept requests
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        settings = get_settings()
        # Remove trailing slash to avoid double slashes in URLs
        self.scheduler_base_url = settings.SCHEDULER_BASE_URL.rstrip("/")
        self.nylas_api_url = settings.NYLAS_API_URL.rstrip("/")
        self.accept_service_url = settings.ACCEPT_SERVICE_URL
        self.access_token = settings.NYLAS_ACCESS_TOKEN
        self.timeout = settings.BOOKING_REQUEST_TIMEOUT
        self._transport = transport

        logger.info(
            f"BookingClient initialized: accept_service={self.accept_service_url}, "
            f"nylas_api={self.nylas_api_url}"
        )

    def build_confirm_url(self, meeting: PendingMeeting) -> str:
        """
        Build the scheduler URL that confirms the booking for the organizer.

        EU scheduler pages are not supported.
        """
        return f"{self.scheduler_base_url}/{meeting.page_slug}/confirm/{meeting.edit_hash}"

    async def confirm(self, meeting: PendingMeeting) -> None:
        """
        Confirm the booking through the accept utility.

        Raises:
            TransportError: If the accept utility could not be reached
            UpstreamError: If it responded with anything other than 200
        """
        confirm_url = self.build_confirm_url(meeting)
        logger.info(
            f"Confirming booking for event {meeting.event_id}",
            extra={"event_id": meeting.event_id},
        )

        await self._send(
            "POST",
            self.accept_service_url,
            json={"url": confirm_url},
            headers={"Content-Type": "application/json"},
        )

    async def cancel(self, meeting: PendingMeeting) -> None:
        """
        Cancel the booking with the Nylas API.

        Raises:
            TransportError: If the Nylas API could not be reached
            UpstreamError: If it responded with anything other than 200
        """
        logger.info(
            f"Cancelling booking for event {meeting.event_id}",
            extra={"event_id": meeting.event_id},
        )

        await self._send(
            "GET",
            f"{self.nylas_api_url}/{quote(meeting.event_id, safe='')}",
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {self.access_token}",
            },
        )

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                logger.error(f"HTTP transport error calling {method} {url}: {e}")
                raise TransportError(str(e) or type(e).__name__) from e

        if response.status_code != 200:
            logger.error(
                f"{method} {url} failed: HTTP {response.status_code} {response.reason_phrase}"
            )
            raise UpstreamError(
                response.status_code,
                f"{response.status_code} {response.reason_phrase}",
            )

        return response

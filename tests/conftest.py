"""
Test configuration and fixtures.

This module sets up test environment and provides shared fixtures for all tests.
"""

import os

import httpx
import pytest

# Credentials must look configured so startup validation passes under TestClient.
# Must be set BEFORE any imports of shared.config
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["NYLAS_ACCESS_TOKEN"] = "nylas-test-token"
os.environ["SCHEDULER_BASE_URL"] = "https://schedule.nylas.com"
os.environ["ACCEPT_SERVICE_URL"] = "http://localhost:3000/accept"
os.environ["NYLAS_API_URL"] = "https://api.nylas.com"
os.environ["APP_BASE_URL"] = "http://localhost:8000"


class RecordingHandler:
    """
    httpx.MockTransport handler that records requests.

    Responses are keyed by (method, url); unknown requests get a 404.
    A value may be an int status code or an exception to raise.
    """

    def __init__(self, responses: dict[tuple[str, str], object] | None = None):
        self.responses = responses or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.responses.get((request.method, str(request.url)), 404)
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome)


@pytest.fixture
def recording_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def booking_client(recording_handler):
    from shared.booking_client import BookingClient

    return BookingClient(transport=httpx.MockTransport(recording_handler))


@pytest.fixture
def store():
    from database.pending_store import PendingMeetingStore

    return PendingMeetingStore()


@pytest.fixture
def service(store, booking_client):
    from agent.services.pending_meeting_service import PendingMeetingService

    return PendingMeetingService(store, booking_client)

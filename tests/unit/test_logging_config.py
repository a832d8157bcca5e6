"""Unit tests for structured JSON logging."""

import json
import logging
import sys

from shared.logging_config import JSONFormatter


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="agent.services.pending_meeting_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Meeting %s confirmed",
        args=("evt1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "agent.services.pending_meeting_service"
        assert data["message"] == "Meeting evt1 confirmed"
        assert "timestamp" in data
        assert "event_id" not in data

    def test_event_id_included_when_present(self):
        data = json.loads(JSONFormatter().format(make_record(event_id="evt1")))

        assert data["event_id"] == "evt1"

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in data["exception"]

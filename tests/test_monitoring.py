from unittest.mock import MagicMock

import pytest
from flask import Flask

from borrowing_service.config.settings import Config
from borrowing_service.middleware import monitoring


@pytest.fixture
def counters(monkeypatch):
    requests_total = MagicMock()
    duration = MagicMock()
    monkeypatch.setattr(monitoring, "api_requests_total", requests_total)
    monkeypatch.setattr(monitoring, "api_request_duration", duration)
    return requests_total, duration


def test_track_request_is_silent_when_metrics_disabled(monkeypatch, counters):
    monkeypatch.setattr(Config, "ENABLE_METRICS", False)
    requests_total, duration = counters

    @monitoring.track_request("borrow")
    def view():
        return {"status": "success"}, 200

    assert view() == ({"status": "success"}, 200)
    requests_total.labels.assert_not_called()
    duration.labels.assert_not_called()


def test_track_request_records_when_metrics_enabled(monkeypatch, counters):
    monkeypatch.setattr(Config, "ENABLE_METRICS", True)
    requests_total, duration = counters

    @monitoring.track_request("borrow")
    def view():
        return {"status": "success"}, 201

    with Flask(__name__).test_request_context("/borrowings/borrow", method="POST"):
        view()

    requests_total.labels.assert_called_once_with(method="POST", endpoint="borrow", status=201)
    duration.labels.assert_called_once_with(endpoint="borrow")


def test_track_operation_respects_flag(monkeypatch):
    operations = MagicMock()
    monkeypatch.setattr(monitoring, "borrowing_operations_total", operations)
    monkeypatch.setattr(Config, "ENABLE_METRICS", False)

    monitoring.track_operation("borrow", "success")

    operations.labels.assert_not_called()

import json
from unittest.mock import MagicMock

import pytest
import requests

from borrowing_service.domain.exceptions import (
    FieldAbsentError,
    GatewayCommunicationError,
    RecordNotFoundError,
)
from borrowing_service.infrastructure.clients.http_client import ServiceHttpClient
from borrowing_service.infrastructure.gateways.catalog_gateway import HttpCatalogGateway
from borrowing_service.infrastructure.gateways.directory_gateway import HttpDirectoryGateway
from borrowing_service.infrastructure.gateways.notification_gateway import HttpNotificationGateway
from borrowing_service.infrastructure.gateways.queued_notification_gateway import QueuedNotificationGateway


def _response(status_code=200, payload=None, text=None):
    response = MagicMock()
    response.status_code = status_code
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    response.text = text
    if payload is not None:
        response.json.return_value = payload
    else:
        response.json.side_effect = ValueError("no json")
    return response


def _client(service, response=None, error=None, base_url="http://svc.test/"):
    session = MagicMock()
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = response
    return ServiceHttpClient(service, base_url, timeout=2, session=session), session


def test_catalog_returns_typed_book():
    client, session = _client("catalog", _response(payload={"title": " Clean Code ", "available": False}))

    book = HttpCatalogGateway(client).get_book("B1")

    assert book.title == "Clean Code"
    assert book.available is False
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["url"] == "http://svc.test/books/B1"
    assert kwargs["timeout"] == 2


def test_catalog_get_title_shortcut():
    client, _ = _client("catalog", _response(payload={"title": "Refactoring"}))

    assert HttpCatalogGateway(client).get_title("B9") == "Refactoring"


def test_catalog_missing_title_is_field_absent():
    client, _ = _client("catalog", _response(payload={"name": "Clean Code"}))

    with pytest.raises(FieldAbsentError) as excinfo:
        HttpCatalogGateway(client).get_book("B1")

    assert excinfo.value.field == "title"


def test_catalog_404_is_not_found():
    client, _ = _client("catalog", _response(status_code=404, payload={"error": "nope"}))

    with pytest.raises(RecordNotFoundError):
        HttpCatalogGateway(client).get_book("B1")


def test_catalog_server_error_is_communication_error():
    client, _ = _client("catalog", _response(status_code=503, text="unavailable"))

    with pytest.raises(GatewayCommunicationError):
        HttpCatalogGateway(client).get_book("B1")


def test_timeout_is_communication_error():
    client, _ = _client("catalog", error=requests.Timeout("slow"))

    with pytest.raises(GatewayCommunicationError):
        HttpCatalogGateway(client).get_book("B1")


def test_connection_error_is_communication_error():
    client, _ = _client("directory", error=requests.ConnectionError("refused"))

    with pytest.raises(GatewayCommunicationError):
        HttpDirectoryGateway(client).get_contact("M1")


def test_non_json_body_is_communication_error():
    client, _ = _client("catalog", _response(text="<html>oops</html>"))

    with pytest.raises(GatewayCommunicationError):
        HttpCatalogGateway(client).get_book("B1")


def test_unconfigured_url_is_communication_error():
    client, session = _client("catalog", _response(payload={"title": "x"}), base_url=None)

    with pytest.raises(GatewayCommunicationError):
        HttpCatalogGateway(client).get_book("B1")
    session.request.assert_not_called()


def test_directory_returns_contact():
    client, session = _client("directory", _response(payload={"email": "m1@example.com", "name": "Ada"}))

    contact = HttpDirectoryGateway(client).get_contact("M1")

    assert contact.email == "m1@example.com"
    assert contact.name == "Ada"
    assert session.request.call_args.kwargs["url"] == "http://svc.test/members/M1"


def test_directory_missing_email_is_field_absent():
    client, _ = _client("directory", _response(payload={"email": None}))

    with pytest.raises(FieldAbsentError):
        HttpDirectoryGateway(client).get_contact("M1")


def test_notification_posts_message():
    client, session = _client("notification", _response(status_code=202))

    HttpNotificationGateway(client).send("m1@example.com", "Hello", "Body")

    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == "http://svc.test/notifications/email"
    assert kwargs["json"] == {"to": "m1@example.com", "subject": "Hello", "body": "Body"}


def test_notification_missing_endpoint_is_communication_error():
    client, _ = _client("notification", _response(status_code=404, text=""))

    with pytest.raises(GatewayCommunicationError):
        HttpNotificationGateway(client).send("m1@example.com", "Hello", "Body")


def test_queued_notification_enqueues_task():
    task = MagicMock()
    task.delay.return_value.id = "task-1"

    QueuedNotificationGateway(task=task).send("m1@example.com", "Hello", "Body")

    task.delay.assert_called_once_with("m1@example.com", "Hello", "Body")


def test_queued_notification_broker_failure():
    task = MagicMock()
    task.delay.side_effect = OSError("broker down")

    with pytest.raises(GatewayCommunicationError):
        QueuedNotificationGateway(task=task).send("m1@example.com", "Hello", "Body")

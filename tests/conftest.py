from datetime import date

import pytest

from borrowing_service import create_app
from borrowing_service.application.services.borrowing_orchestrator import BorrowingOrchestrator
from borrowing_service.config.settings import TestingConfig
from borrowing_service.infrastructure.repositories.in_memory_transaction_store import InMemoryTransactionStore
from borrowing_service.infrastructure.service_container import ServiceContainer
from tests.fakes import FakeCatalogGateway, FakeDirectoryGateway, FakeNotificationGateway

TODAY = date(2024, 3, 1)


class Clock:
    """Settable clock so tests can move 'today' forward."""

    def __init__(self, today: date = TODAY):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store():
    return InMemoryTransactionStore()


@pytest.fixture
def catalog():
    return FakeCatalogGateway({"B1": "Clean Code", "B2": "Design Patterns"})


@pytest.fixture
def directory():
    return FakeDirectoryGateway({"M1": "m1@example.com", "M2": "m2@example.com"})


@pytest.fixture
def notifier():
    return FakeNotificationGateway()


@pytest.fixture
def orchestrator(store, catalog, directory, notifier, clock):
    return BorrowingOrchestrator(
        transaction_store=store,
        catalog_gateway=catalog,
        directory_gateway=directory,
        notification_gateway=notifier,
        loan_period_days=14,
        clock=clock,
    )


@pytest.fixture
def app(store, catalog, directory, notifier):
    ServiceContainer.reset()
    flask_app = create_app(TestingConfig)
    container = flask_app.config["service_container"]
    container.register(
        transaction_store=store,
        catalog_gateway=catalog,
        directory_gateway=directory,
        notification_gateway=notifier,
    )
    yield flask_app
    ServiceContainer.reset()


@pytest.fixture
def client(app):
    return app.test_client()

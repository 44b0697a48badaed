import pytest

from borrowing_service.config.settings import TestingConfig
from borrowing_service.infrastructure.repositories.in_memory_transaction_store import InMemoryTransactionStore
from borrowing_service.infrastructure.service_container import ServiceContainer


@pytest.fixture
def container():
    ServiceContainer.reset()
    yield ServiceContainer(TestingConfig)
    ServiceContainer.reset()


def test_gateways_use_selected_config_urls(container):
    assert container.get_catalog_gateway().client.base_url == "http://catalog.test"
    assert container.get_directory_gateway().client.base_url == "http://directory.test"
    assert container.get_notification_gateway().client.base_url == "http://notification.test"


def test_store_follows_selected_config(container):
    assert isinstance(container.get_transaction_store(), InMemoryTransactionStore)


def test_orchestrator_is_built_once(container):
    assert container.get_orchestrator() is container.get_orchestrator()

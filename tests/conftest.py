"""
Pytest configuration and shared fixtures.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from acceptance_agent.adapters.toolkit.visa_toolkit_adapter import (
    VisaAcceptanceToolkitAdapter,
)
from acceptance_agent.container import DependencyContainer, container

VISA_ENV = {
    "VISA_ACCEPTANCE_MERCHANT_ID": "merchant-123",
    "VISA_ACCEPTANCE_API_KEY_ID": "key-456",
    "VISA_ACCEPTANCE_SECRET_KEY": "secret-789",
}


class FakeResource:
    """Resource group recording every call it receives."""

    def __init__(self, records=None, list_payload=None):
        self.calls = []
        self.records = records or [{"id": "rec_1", "status": "DRAFT"}]
        self.list_payload = list_payload

    async def list(self):
        self.calls.append(("list",))
        if self.list_payload is not None:
            return self.list_payload
        return {"data": self.records, "total": len(self.records)}

    async def get(self, record_id):
        self.calls.append(("get", record_id))
        return {"id": record_id, "status": "DRAFT"}

    async def create(self, payload):
        self.calls.append(("create", payload))
        return {"id": "rec_new", **payload}

    async def update(self, record_id, payload):
        self.calls.append(("update", record_id, payload))
        return {"id": record_id, **payload}


class FakeInvoices(FakeResource):
    async def send(self, record_id):
        self.calls.append(("send", record_id))
        return {"id": record_id, "status": "SENT"}

    async def cancel(self, record_id):
        self.calls.append(("cancel", record_id))
        return {"id": record_id, "status": "CANCELED"}


class CountingFactory:
    """Toolkit constructor that counts how often it is invoked."""

    def __init__(self, toolkit=None):
        self.invoices = FakeInvoices()
        self.payment_links = FakeResource(records=[{"id": "pl_1", "status": "ACTIVE"}])
        self.toolkit = toolkit or SimpleNamespace(
            client=SimpleNamespace(
                invoices=self.invoices, paymentLinks=self.payment_links
            )
        )
        self.calls = []

    def __call__(self, **options):
        self.calls.append(options)
        return self.toolkit


@pytest.fixture
def mock_logger():
    """
    Create a mock logger for testing.

    Returns:
        Mock logger instance
    """
    return MagicMock()


@pytest.fixture
def no_visa_env(monkeypatch):
    """Remove every Visa Acceptance variable from the environment."""
    for key in list(VISA_ENV) + ["VISA_ACCEPTANCE_ENVIRONMENT", "VISA_ACCEPTANCE_TOOLKIT"]:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def visa_env(no_visa_env):
    """Set a complete Visa Acceptance credential set."""
    for key, value in VISA_ENV.items():
        no_visa_env.setenv(key, value)
    return no_visa_env


@pytest.fixture
def toolkit_factory():
    return CountingFactory()


@pytest.fixture
def wired_container(toolkit_factory):
    """
    Global container whose toolkit adapter builds fake toolkits.

    Returns:
        The global DependencyContainer, reset after the test
    """
    container.reset()
    container._instances["toolkit_adapter"] = VisaAcceptanceToolkitAdapter(
        toolkit_factory=toolkit_factory
    )
    yield container
    container.reset()


@pytest.fixture
def dependency_container(mock_logger):
    """
    Create a dependency container with mocked dependencies for testing.

    Returns:
        DependencyContainer instance with mocked logger
    """
    fresh = DependencyContainer()
    # Replace the logger with our mock
    fresh._logger = mock_logger
    return fresh

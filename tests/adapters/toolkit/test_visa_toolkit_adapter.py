"""
Tests for the Visa Acceptance toolkit adapter (client provisioner).
"""

import asyncio
from types import SimpleNamespace

import pytest

from acceptance_agent.adapters.toolkit.visa_toolkit_adapter import (
    ACTION_CONFIGURATION,
    VisaAcceptanceToolkitAdapter,
    load_toolkit_factory,
)
from acceptance_agent.exceptions import CapabilityUnavailableError, ConfigurationError


class TestGetClient:
    """Test cases for lazy, memoized construction."""

    @pytest.mark.asyncio
    async def test_missing_credentials_never_construct(self, no_visa_env, toolkit_factory):
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=toolkit_factory)

        with pytest.raises(ConfigurationError, match="credentials are missing"):
            await adapter.get_client()

        assert toolkit_factory.calls == []

    @pytest.mark.asyncio
    async def test_construction_options(self, visa_env, toolkit_factory):
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=toolkit_factory)

        client = await adapter.get_client()

        assert client is toolkit_factory.toolkit.client
        assert toolkit_factory.calls == [
            {
                "merchant_id": "merchant-123",
                "api_key_id": "key-456",
                "secret_key": "secret-789",
                "configuration": {
                    "actions": ACTION_CONFIGURATION["actions"],
                    "context": {"environment": "SANDBOX"},
                },
            }
        ]

    @pytest.mark.asyncio
    async def test_production_environment(self, visa_env, toolkit_factory):
        visa_env.setenv("VISA_ACCEPTANCE_ENVIRONMENT", "PRODUCTION")
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=toolkit_factory)

        await adapter.get_client()

        options = toolkit_factory.calls[0]
        assert options["configuration"]["context"] == {"environment": "PRODUCTION"}

    def test_action_declaration_enables_every_action(self):
        actions = ACTION_CONFIGURATION["actions"]
        assert set(actions["invoices"]) == {
            "create",
            "update",
            "list",
            "get",
            "send",
            "cancel",
        }
        assert set(actions["paymentLinks"]) == {"create", "update", "list", "get"}
        assert all(all(group.values()) for group in actions.values())

    @pytest.mark.asyncio
    async def test_memoized_across_calls(self, visa_env, toolkit_factory):
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=toolkit_factory)

        first = await adapter.get_client()
        second = await adapter.get_client()

        assert first is second
        assert len(toolkit_factory.calls) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("callers", [1, 5, 50])
    async def test_concurrent_first_calls_construct_once(self, visa_env, callers):
        constructed = []

        async def slow_factory(**options):
            constructed.append(options)
            await asyncio.sleep(0.01)
            return SimpleNamespace(client=SimpleNamespace(invoices=object()))

        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=slow_factory)

        clients = await asyncio.gather(*(adapter.get_client() for _ in range(callers)))

        assert len(constructed) == 1
        assert all(client is clients[0] for client in clients)

    @pytest.mark.asyncio
    async def test_failed_construction_is_retried(self, visa_env):
        attempts = []

        def flaky_factory(**options):
            attempts.append(options)
            if len(attempts) == 1:
                raise RuntimeError("toolkit handshake failed")
            return SimpleNamespace(client=SimpleNamespace(invoices=object()))

        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=flaky_factory)

        with pytest.raises(RuntimeError, match="toolkit handshake failed"):
            await adapter.get_client()
        client = await adapter.get_client()

        assert len(attempts) == 2
        assert client is await adapter.get_client()

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_a_failure(self, visa_env):
        attempts = []

        async def failing_factory(**options):
            attempts.append(options)
            await asyncio.sleep(0.01)
            raise RuntimeError("remote down")

        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=failing_factory)

        results = await asyncio.gather(
            *(adapter.get_client() for _ in range(5)), return_exceptions=True
        )

        assert len(attempts) == 1
        assert all(isinstance(r, RuntimeError) for r in results)

    @pytest.mark.asyncio
    async def test_cancelled_construction_is_retried(self, visa_env):
        release = asyncio.Event()
        attempts = []

        async def slow_factory(**options):
            attempts.append(options)
            await release.wait()
            return SimpleNamespace(client=SimpleNamespace(invoices=object()))

        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=slow_factory)
        caller = asyncio.ensure_future(adapter.get_toolkit())
        while not attempts:
            await asyncio.sleep(0)

        adapter._pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller
        await asyncio.sleep(0)

        assert adapter._pending is None
        release.set()
        toolkit = await adapter.get_toolkit()

        assert len(attempts) == 2
        assert toolkit is await adapter.get_toolkit()

    @pytest.mark.asyncio
    async def test_toolkit_without_client_attribute(self, visa_env):
        toolkit = SimpleNamespace(invoices=object())
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=lambda **_: toolkit)

        assert await adapter.get_client() is toolkit

    @pytest.mark.asyncio
    async def test_reset_forgets_toolkit(self, visa_env, toolkit_factory):
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=toolkit_factory)
        await adapter.get_client()

        adapter.reset()
        await adapter.get_client()

        assert len(toolkit_factory.calls) == 2


class TestResources:
    """Test cases for resource group projection."""

    @pytest.mark.asyncio
    async def test_invoice_resource(self, visa_env, toolkit_factory):
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=toolkit_factory)
        assert await adapter.get_invoice_resource() is toolkit_factory.invoices

    @pytest.mark.asyncio
    async def test_payment_link_resource_camel_case(self, visa_env, toolkit_factory):
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=toolkit_factory)
        assert await adapter.get_payment_link_resource() is toolkit_factory.payment_links

    @pytest.mark.asyncio
    async def test_payment_link_resource_snake_case(self, visa_env):
        links = object()
        toolkit = SimpleNamespace(client=SimpleNamespace(payment_links=links))
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=lambda **_: toolkit)

        assert await adapter.get_payment_link_resource() is links

    @pytest.mark.asyncio
    async def test_missing_invoice_resource(self, visa_env):
        toolkit = SimpleNamespace(client=SimpleNamespace(paymentLinks=object()))
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=lambda **_: toolkit)

        with pytest.raises(CapabilityUnavailableError, match="Invoice operations"):
            await adapter.get_invoice_resource()

    @pytest.mark.asyncio
    async def test_missing_payment_link_resource(self, visa_env):
        toolkit = SimpleNamespace(client=SimpleNamespace(invoices=object()))
        adapter = VisaAcceptanceToolkitAdapter(toolkit_factory=lambda **_: toolkit)

        with pytest.raises(CapabilityUnavailableError, match="Payment link operations"):
            await adapter.get_payment_link_resource()


class TestLoadToolkitFactory:
    """Test cases for resolving the toolkit constructor from settings."""

    def test_valid_path(self):
        factory = load_toolkit_factory("types:SimpleNamespace")
        assert factory is SimpleNamespace

    @pytest.mark.parametrize("path", ["no_colon", ":attr", "module:"])
    def test_malformed_path(self, path):
        with pytest.raises(CapabilityUnavailableError, match="module:attribute"):
            load_toolkit_factory(path)

    def test_missing_module(self):
        with pytest.raises(CapabilityUnavailableError, match="is not installed"):
            load_toolkit_factory("no_such_toolkit_module_xyz:Toolkit")

    def test_not_callable(self):
        with pytest.raises(CapabilityUnavailableError, match="does not name a callable"):
            load_toolkit_factory("types:__doc__")

    @pytest.mark.asyncio
    async def test_configured_factory_is_used(self, visa_env):
        visa_env.setenv("VISA_ACCEPTANCE_TOOLKIT", "types:SimpleNamespace")
        adapter = VisaAcceptanceToolkitAdapter()

        toolkit = await adapter.get_toolkit()

        assert toolkit.merchant_id == "merchant-123"
        assert toolkit.configuration["context"] == {"environment": "SANDBOX"}

    @pytest.mark.asyncio
    async def test_unimportable_toolkit_is_retryable(self, visa_env):
        visa_env.setenv("VISA_ACCEPTANCE_TOOLKIT", "no_such_toolkit_module_xyz:Toolkit")
        adapter = VisaAcceptanceToolkitAdapter()

        with pytest.raises(CapabilityUnavailableError):
            await adapter.get_client()

        visa_env.setenv("VISA_ACCEPTANCE_TOOLKIT", "types:SimpleNamespace")
        assert (await adapter.get_client()).merchant_id == "merchant-123"

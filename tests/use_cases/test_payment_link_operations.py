"""
Tests for the PaymentLinkOperationsUseCase.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from acceptance_agent.exceptions import CapabilityUnavailableError
from acceptance_agent.ports.toolkit.toolkit_port import ToolkitProvisionerPort
from acceptance_agent.use_cases.payment_links.payment_link_operations import (
    PaymentLinkOperationsUseCase,
)


def _provisioner(resource):
    toolkit = MagicMock(spec=ToolkitProvisionerPort)
    toolkit.get_payment_link_resource = AsyncMock(return_value=resource)
    return toolkit


class TestPaymentLinkOperationsUseCase:
    """Test cases for the PaymentLinkOperationsUseCase."""

    @pytest.mark.asyncio
    async def test_list(self, toolkit_factory, mock_logger):
        use_case = PaymentLinkOperationsUseCase(
            _provisioner(toolkit_factory.payment_links), mock_logger
        )

        assert await use_case.list() == [{"id": "pl_1", "status": "ACTIVE"}]
        mock_logger.info.assert_any_call("Calling payment_links.list")

    @pytest.mark.asyncio
    async def test_list_non_sequence_passthrough(self, mock_logger):
        resource = SimpleNamespace(listPaymentLinks=AsyncMock(return_value={"items": []}))
        use_case = PaymentLinkOperationsUseCase(_provisioner(resource), mock_logger)

        assert await use_case.list(summary=True) == {"items": []}

    @pytest.mark.asyncio
    async def test_get_and_create(self, toolkit_factory, mock_logger):
        use_case = PaymentLinkOperationsUseCase(
            _provisioner(toolkit_factory.payment_links), mock_logger
        )

        assert await use_case.get("pl_1") == {"id": "pl_1", "status": "DRAFT"}
        created = await use_case.create({"amount": "3.00"})

        assert created == {"id": "rec_new", "amount": "3.00"}
        mock_logger.info.assert_any_call("Payment link created: rec_new")

    @pytest.mark.asyncio
    async def test_update_alias(self, mock_logger):
        resource = SimpleNamespace(
            updatePaymentLink=AsyncMock(return_value={"id": "pl_1", "status": "INACTIVE"})
        )
        use_case = PaymentLinkOperationsUseCase(_provisioner(resource), mock_logger)

        result = await use_case.update("pl_1", {"status": "INACTIVE"})

        assert result["status"] == "INACTIVE"
        resource.updatePaymentLink.assert_awaited_once_with("pl_1", {"status": "INACTIVE"})

    @pytest.mark.asyncio
    async def test_unsupported_retrieval(self, mock_logger):
        use_case = PaymentLinkOperationsUseCase(
            _provisioner(SimpleNamespace(get="field")), mock_logger
        )

        with pytest.raises(CapabilityUnavailableError, match="Payment link retrieval"):
            await use_case.get("pl_1")

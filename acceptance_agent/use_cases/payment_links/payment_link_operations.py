"""
Use case for payment link operations through the payments toolkit.
"""

from typing import Any

from acceptance_agent.use_cases.toolkit_operations import ToolkitOperationsUseCase


class PaymentLinkOperationsUseCase(ToolkitOperationsUseCase):
    """List, read, create and update payment links."""

    resource_name = "payment_links"
    record_label = "Payment link"

    async def _get_resource(self) -> Any:
        return await self._toolkit.get_payment_link_resource()

    async def list(self, summary: bool = False) -> Any:
        return await self._list("Payment link listing", summary=summary)

    async def get(self, link_id: str) -> Any:
        return await self._invoke("get", "Payment link retrieval", link_id)

    async def create(self, payload: Any) -> Any:
        link = await self._invoke("create", "Payment link creation", payload)
        self._log_record("created", link)
        return link

    async def update(self, link_id: str, payload: Any) -> Any:
        link = await self._invoke("update", "Payment link updating", link_id, payload)
        self._log_record("updated", link)
        return link

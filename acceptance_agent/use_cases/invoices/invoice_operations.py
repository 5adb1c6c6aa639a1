"""
Use case for invoice operations through the payments toolkit.
"""

from typing import Any, Optional

from acceptance_agent.exceptions import RequestShapeError
from acceptance_agent.use_cases.toolkit_operations import ToolkitOperationsUseCase

INVOICE_ACTIONS = ("send", "cancel")


class InvoiceOperationsUseCase(ToolkitOperationsUseCase):
    """List, read, create, update, send and cancel invoices."""

    resource_name = "invoices"
    record_label = "Invoice"

    async def _get_resource(self) -> Any:
        return await self._toolkit.get_invoice_resource()

    async def list(self, summary: bool = False) -> Any:
        return await self._list("Invoice listing", summary=summary)

    async def get(self, invoice_id: str) -> Any:
        return await self._invoke("get", "Invoice retrieval", invoice_id)

    async def create(self, payload: Any) -> Any:
        invoice = await self._invoke("create", "Invoice creation", payload)
        self._log_record("created", invoice)
        return invoice

    async def update(self, invoice_id: str, payload: Any) -> Any:
        invoice = await self._invoke("update", "Invoice updating", invoice_id, payload)
        self._log_record("updated", invoice)
        return invoice

    async def send(self, invoice_id: str) -> Any:
        invoice = await self._invoke("send", "Invoice sending", invoice_id)
        self._log_record("sent", invoice)
        return invoice

    async def cancel(self, invoice_id: str) -> Any:
        invoice = await self._invoke("cancel", "Invoice cancellation", invoice_id)
        self._log_record("cancelled", invoice)
        return invoice

    async def perform_action(self, invoice_id: str, action: Optional[object]) -> Any:
        """
        Send or cancel an invoice.

        Args:
            invoice_id: Identifier of the invoice
            action: Either "send" or "cancel"

        Raises:
            RequestShapeError: If the action is anything else
        """
        if not isinstance(action, str) or action not in INVOICE_ACTIONS:
            raise RequestShapeError('Unsupported action. Use "send" or "cancel".')
        if action == "send":
            return await self.send(invoice_id)
        return await self.cancel(invoice_id)

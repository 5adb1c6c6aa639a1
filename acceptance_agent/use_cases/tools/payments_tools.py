"""
Tools "invoices_*" and "payment_links_*" mapped to the toolkit use cases.

One tool per enabled toolkit action, so the chat model sees exactly the
operations the REST surface offers.
"""

import json
import logging
from typing import Any, Optional

from acceptance_agent.exceptions import LLMError
from acceptance_agent.ports.llm.tools_port import ToolsHandlerPort, ToolSpec
from acceptance_agent.use_cases.invoices.invoice_operations import (
    InvoiceOperationsUseCase,
)
from acceptance_agent.use_cases.payment_links.payment_link_operations import (
    PaymentLinkOperationsUseCase,
)


def _id_schema(field: str, description: str) -> dict[str, object]:
    return {
        "type": "object",
        "properties": {field: {"type": "string", "description": description}},
        "required": [field],
        "additionalProperties": False,
    }


def _payload_schema(
    field: str, description: str, id_field: Optional[str] = None
) -> dict[str, object]:
    properties: dict[str, object] = {
        field: {"type": "object", "description": description}
    }
    required = [field]
    if id_field:
        properties[id_field] = {"type": "string", "description": "Identifier"}
        required.insert(0, id_field)
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


class PaymentsToolsHandler(ToolsHandlerPort):
    """Handler for invoice and payment link tools that can be called by an LLM."""

    def __init__(
        self,
        invoices_uc: InvoiceOperationsUseCase,
        payment_links_uc: PaymentLinkOperationsUseCase,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the payments tools handler.

        Args:
            invoices_uc: Use case for invoice operations
            payment_links_uc: Use case for payment link operations
            logger: Logger instance to use for logging
        """
        self._invoices_uc = invoices_uc
        self._payment_links_uc = payment_links_uc
        self._logger = logger or logging.getLogger(__name__)

    def available_tools(self) -> list[ToolSpec]:
        """
        Get a list of available payments tools.

        Returns:
            List of tool specifications for invoices and payment links
        """
        empty: dict[str, object] = {
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        }
        return [
            {
                "name": "invoices_list",
                "description": "List invoices of the merchant.",
                "parameters": empty,
            },
            {
                "name": "invoices_get",
                "description": "Retrieve one invoice by identifier.",
                "parameters": _id_schema("invoice_id", "Invoice identifier"),
            },
            {
                "name": "invoices_create",
                "description": (
                    "Create an invoice. 'invoice' holds customer information, "
                    "order amount and currency, and invoice details."
                ),
                "parameters": _payload_schema("invoice", "Invoice creation payload"),
            },
            {
                "name": "invoices_update",
                "description": "Update fields of an existing invoice.",
                "parameters": _payload_schema(
                    "updates", "Fields to change", id_field="invoice_id"
                ),
            },
            {
                "name": "invoices_send",
                "description": "Send an invoice to its customer.",
                "parameters": _id_schema("invoice_id", "Invoice identifier"),
            },
            {
                "name": "invoices_cancel",
                "description": "Cancel an invoice.",
                "parameters": _id_schema("invoice_id", "Invoice identifier"),
            },
            {
                "name": "payment_links_list",
                "description": "List payment links of the merchant.",
                "parameters": empty,
            },
            {
                "name": "payment_links_get",
                "description": "Retrieve one payment link by identifier.",
                "parameters": _id_schema("payment_link_id", "Payment link identifier"),
            },
            {
                "name": "payment_links_create",
                "description": (
                    "Create a payment link. 'payment_link' holds line items, "
                    "amount and currency."
                ),
                "parameters": _payload_schema(
                    "payment_link", "Payment link creation payload"
                ),
            },
            {
                "name": "payment_links_update",
                "description": "Update fields of an existing payment link.",
                "parameters": _payload_schema(
                    "updates", "Fields to change", id_field="payment_link_id"
                ),
            },
        ]

    def _required_str(self, arguments: dict[str, Any], key: str) -> str:
        value = arguments.get(key)
        if not isinstance(value, str) or not value.strip():
            raise LLMError(f"'{key}' must be a non-empty string")
        return value.strip()

    def _required_obj(self, arguments: dict[str, Any], key: str) -> dict[str, Any]:
        value = arguments.get(key)
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                raise LLMError(f"'{key}' must be a JSON object")
        if not isinstance(value, dict):
            raise LLMError(f"'{key}' must be a JSON object")
        return value

    async def dispatch(self, name: str, arguments: dict[str, Any]) -> str:
        """
        Dispatch a tool invocation to the matching use case.

        Args:
            name: Name of the tool to invoke
            arguments: Arguments to pass to the tool

        Returns:
            JSON-encoded toolkit result

        Raises:
            ValueError: If the tool name is unknown
            LLMError: If the arguments are malformed
        """
        self._logger.info(f"Dispatching tool: {name}")
        invoices = self._invoices_uc
        links = self._payment_links_uc

        if name == "invoices_list":
            result = await invoices.list()
        elif name == "invoices_get":
            result = await invoices.get(self._required_str(arguments, "invoice_id"))
        elif name == "invoices_create":
            result = await invoices.create(self._required_obj(arguments, "invoice"))
        elif name == "invoices_update":
            result = await invoices.update(
                self._required_str(arguments, "invoice_id"),
                self._required_obj(arguments, "updates"),
            )
        elif name == "invoices_send":
            result = await invoices.send(self._required_str(arguments, "invoice_id"))
        elif name == "invoices_cancel":
            result = await invoices.cancel(self._required_str(arguments, "invoice_id"))
        elif name == "payment_links_list":
            result = await links.list()
        elif name == "payment_links_get":
            result = await links.get(self._required_str(arguments, "payment_link_id"))
        elif name == "payment_links_create":
            result = await links.create(self._required_obj(arguments, "payment_link"))
        elif name == "payment_links_update":
            result = await links.update(
                self._required_str(arguments, "payment_link_id"),
                self._required_obj(arguments, "updates"),
            )
        else:
            raise ValueError(f"Unknown tool: {name}")

        return json.dumps({"status": "ok", "data": result}, ensure_ascii=False, default=str)

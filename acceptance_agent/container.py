"""
Dependency injection container for managing application dependencies.
"""

import logging

from acceptance_agent.adapters.llm.openai_chat_adapter import OpenAIChatAdapter
from acceptance_agent.adapters.toolkit.visa_toolkit_adapter import (
    VisaAcceptanceToolkitAdapter,
)
from acceptance_agent.ports.llm.chat_port import ChatPort
from acceptance_agent.ports.llm.tools_port import ToolsHandlerPort
from acceptance_agent.use_cases.invoices.invoice_operations import (
    InvoiceOperationsUseCase,
)
from acceptance_agent.use_cases.payment_links.payment_link_operations import (
    PaymentLinkOperationsUseCase,
)
from acceptance_agent.use_cases.tools.payments_tools import PaymentsToolsHandler


class DependencyContainer:
    """
    Container for managing application dependencies using dependency injection.
    """

    def __init__(self):
        self._instances = {}
        self._logger = logging.getLogger(__name__)

    def get_toolkit_adapter(self) -> VisaAcceptanceToolkitAdapter:
        """
        Get the process-wide toolkit provisioner.

        Returns:
            VisaAcceptanceToolkitAdapter holding the memoized toolkit
        """
        if "toolkit_adapter" not in self._instances:
            self._instances["toolkit_adapter"] = VisaAcceptanceToolkitAdapter(
                logger=self._logger
            )
        return self._instances["toolkit_adapter"]

    def get_invoice_operations_use_case(self) -> InvoiceOperationsUseCase:
        """
        Get invoice operations use case with injected dependencies.

        Returns:
            Configured InvoiceOperationsUseCase
        """
        if "invoice_operations_use_case" not in self._instances:
            toolkit = self.get_toolkit_adapter()
            self._instances["invoice_operations_use_case"] = InvoiceOperationsUseCase(
                toolkit, self._logger
            )
        return self._instances["invoice_operations_use_case"]

    def get_payment_link_operations_use_case(self) -> PaymentLinkOperationsUseCase:
        """
        Get payment link operations use case with injected dependencies.

        Returns:
            Configured PaymentLinkOperationsUseCase
        """
        if "payment_link_operations_use_case" not in self._instances:
            toolkit = self.get_toolkit_adapter()
            self._instances["payment_link_operations_use_case"] = (
                PaymentLinkOperationsUseCase(toolkit, self._logger)
            )
        return self._instances["payment_link_operations_use_case"]

    def get_payments_tools_handler(self) -> ToolsHandlerPort:
        """
        Registry of 'invoices_*' and 'payment_links_*' tools backed by the use cases.
        """
        if "payments_tools_handler" not in self._instances:
            self._instances["payments_tools_handler"] = PaymentsToolsHandler(
                self.get_invoice_operations_use_case(),
                self.get_payment_link_operations_use_case(),
                self._logger,
            )
        return self._instances["payments_tools_handler"]

    def get_chat_adapter(self) -> ChatPort:
        """
        Chat adapter with the payments tools (function-calling).

        Raises:
            ConfigurationError: If OPENAI_API_KEY is not set
        """
        if "chat_adapter" not in self._instances:
            self._instances["chat_adapter"] = OpenAIChatAdapter(
                tools_handler=self.get_payments_tools_handler(), logger=self._logger
            )
        return self._instances["chat_adapter"]

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._instances.clear()


# Global container instance
container = DependencyContainer()

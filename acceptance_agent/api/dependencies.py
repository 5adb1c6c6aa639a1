"""
FastAPI dependency functions for retrieving use cases from the container.
"""

from acceptance_agent.container import container
from acceptance_agent.ports.llm.chat_port import ChatPort
from acceptance_agent.use_cases.invoices.invoice_operations import (
    InvoiceOperationsUseCase,
)
from acceptance_agent.use_cases.payment_links.payment_link_operations import (
    PaymentLinkOperationsUseCase,
)


def get_invoice_uc() -> InvoiceOperationsUseCase:
    """
    Get the invoice operations use case from the container.

    Returns:
        InvoiceOperationsUseCase: The invoice operations use case instance
    """
    return container.get_invoice_operations_use_case()


def get_payment_link_uc() -> PaymentLinkOperationsUseCase:
    """
    Get the payment link operations use case from the container.

    Returns:
        PaymentLinkOperationsUseCase: The payment link operations use case instance
    """
    return container.get_payment_link_operations_use_case()


def get_chat_adapter() -> ChatPort:
    """
    Get the tools-enabled chat adapter from the container.

    Returns:
        ChatPort: The chat adapter instance
    """
    return container.get_chat_adapter()

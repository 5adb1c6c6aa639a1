"""
Toolkit port interface defining the contract for payments toolkit provisioning.
"""

from abc import ABC, abstractmethod
from typing import Any


class ToolkitProvisionerPort(ABC):
    """Port interface for obtaining handles on the remote payments toolkit."""

    @abstractmethod
    async def get_client(self) -> Any:
        """
        Get the memoized toolkit client, constructing it on first use.

        Returns:
            The realized client handle

        Raises:
            ConfigurationError: If credentials are missing
        """
        pass

    @abstractmethod
    async def get_invoice_resource(self) -> Any:
        """
        Get the invoices resource group of the client.

        Raises:
            CapabilityUnavailableError: If the client exposes no invoices group
        """
        pass

    @abstractmethod
    async def get_payment_link_resource(self) -> Any:
        """
        Get the payment links resource group of the client.

        Raises:
            CapabilityUnavailableError: If the client exposes no payment links group
        """
        pass

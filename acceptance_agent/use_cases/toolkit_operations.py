"""
Shared plumbing for use cases that call one toolkit resource group.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from acceptance_agent.entities.record import PaymentRecord
from acceptance_agent.exceptions import (
    BaseAppError,
    CapabilityUnavailableError,
    RemoteOperationError,
)
from acceptance_agent.ports.toolkit.toolkit_port import ToolkitProvisionerPort
from acceptance_agent.utils.toolkit import (
    OPERATION_ALIASES,
    call_toolkit_method,
    format_toolkit_error,
    normalise_toolkit_list,
    resolve_toolkit_method,
)


class ToolkitOperationsUseCase(ABC):
    """Resolve an operation on a resource group, invoke it and log the outcome."""

    resource_name: str = ""
    record_label: str = "Record"

    def __init__(
        self,
        toolkit: ToolkitProvisionerPort,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the use case.

        Args:
            toolkit: Provisioner for the payments toolkit client
            logger: Logger instance to use for logging
        """
        self._toolkit = toolkit
        self._logger = logger or logging.getLogger(__name__)

    @abstractmethod
    async def _get_resource(self) -> Any:
        """Return the toolkit resource group this use case operates on."""
        pass

    async def _invoke(self, operation: str, capability: str, *args: Any) -> Any:
        """
        Run ``operation`` on the resource group.

        Args:
            operation: Logical operation key in OPERATION_ALIASES
            capability: Human name used in the unsupported-operation message
            *args: Positional arguments for the toolkit call

        Raises:
            CapabilityUnavailableError: If no alias of the operation is callable
            RemoteOperationError: If the toolkit call itself fails
        """
        resource = await self._get_resource()
        method = resolve_toolkit_method(
            resource, OPERATION_ALIASES[self.resource_name][operation]
        )
        if method is None:
            raise CapabilityUnavailableError(
                f"{capability} is not supported by the current Visa Acceptance toolkit client."
            )
        self._logger.info(f"Calling {self.resource_name}.{operation}")
        try:
            return await call_toolkit_method(method, *args)
        except BaseAppError:
            raise
        except Exception as e:
            self._logger.error(f"Error in {self.resource_name}.{operation}: {e}")
            raise RemoteOperationError(format_toolkit_error(e)) from e

    async def _list(self, capability: str, summary: bool = False) -> Any:
        result = normalise_toolkit_list(await self._invoke("list", capability))
        if isinstance(result, (list, tuple)):
            self._logger.info(f"Found {len(result)} {self.resource_name}")
            if summary:
                return [
                    PaymentRecord(item).get_details() if isinstance(item, Mapping) else item
                    for item in result
                ]
        return result

    def _log_record(self, verb: str, record: Any) -> None:
        if isinstance(record, Mapping):
            self._logger.info(f"{self.record_label} {verb}: {PaymentRecord(record).id}")
        else:
            self._logger.info(f"{self.record_label} {verb}")

"""
Visa Acceptance agent toolkit adapter: builds the toolkit once per process.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import logging
from typing import Any, Callable, Optional

from typing_extensions import override

from acceptance_agent.config.settings import Settings, has_credentials, settings
from acceptance_agent.exceptions import CapabilityUnavailableError, ConfigurationError
from acceptance_agent.ports.toolkit.toolkit_port import ToolkitProvisionerPort

ACTION_CONFIGURATION: dict[str, dict[str, dict[str, bool]]] = {
    "actions": {
        "invoices": {
            "create": True,
            "update": True,
            "list": True,
            "get": True,
            "send": True,
            "cancel": True,
        },
        "paymentLinks": {
            "create": True,
            "update": True,
            "list": True,
            "get": True,
        },
    }
}

MISSING_CREDENTIALS_MESSAGE = (
    "Visa Acceptance credentials are missing. Set VISA_ACCEPTANCE_MERCHANT_ID, "
    "VISA_ACCEPTANCE_API_KEY_ID, and VISA_ACCEPTANCE_SECRET_KEY."
)


def load_toolkit_factory(path: str) -> Callable[..., Any]:
    """
    Import a toolkit constructor from a ``module:attribute`` path.

    Raises:
        CapabilityUnavailableError: If the path is malformed or cannot be imported
    """
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise CapabilityUnavailableError(
            f"VISA_ACCEPTANCE_TOOLKIT must look like 'module:attribute', got {path!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise CapabilityUnavailableError(
            f"Visa Acceptance toolkit module {module_name!r} is not installed: {e}"
        )
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise CapabilityUnavailableError(
            f"Visa Acceptance toolkit {path!r} does not name a callable"
        )
    return factory


class VisaAcceptanceToolkitAdapter(ToolkitProvisionerPort):
    """Memoized, lazily constructed handle on the Visa Acceptance toolkit.

    The cell moves from empty to pending (a shared task) to ready. The
    empty-to-pending transition happens before the first ``await`` so
    concurrent first callers all await one construction. A failed
    construction empties the cell again so the next call retries.
    """

    def __init__(
        self,
        toolkit_factory: Optional[Callable[..., Any]] = None,
        app_settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            toolkit_factory: Toolkit constructor (defaults to the one named in settings)
            app_settings: Settings source (defaults to the global settings)
            logger: Logger instance to use for logging
        """
        self._factory = toolkit_factory
        self._settings = app_settings or settings
        self._logger = logger or logging.getLogger(__name__)
        self._toolkit: Any = None
        self._pending: Optional[asyncio.Task[Any]] = None

    def _build_options(self) -> dict[str, Any]:
        credentials = self._settings.visa_credentials()
        return {
            "merchant_id": credentials.merchant_id,
            "api_key_id": credentials.api_key_id,
            "secret_key": credentials.secret_key,
            "configuration": {
                **ACTION_CONFIGURATION,
                "context": {"environment": credentials.environment},
            },
        }

    async def _construct(self) -> Any:
        try:
            factory = self._factory or load_toolkit_factory(
                self._settings.toolkit_factory
            )
            options = self._build_options()
            environment = options["configuration"]["context"]["environment"]
            self._logger.info(
                f"Constructing Visa Acceptance toolkit (environment={environment})"
            )
            toolkit = factory(**options)
            if inspect.isawaitable(toolkit):
                toolkit = await toolkit
        except Exception as e:
            self._pending = None
            self._logger.error(f"Visa Acceptance toolkit construction failed: {e}")
            raise
        self._toolkit = toolkit
        self._pending = None
        return toolkit

    def _forget_cancelled(self, task: asyncio.Future[Any]) -> None:
        # A cancelled build never reaches the except clause in _construct
        if task.cancelled() and self._pending is task:
            self._pending = None

    async def get_toolkit(self) -> Any:
        """
        Get the toolkit instance, constructing it at most once.

        Raises:
            ConfigurationError: If credentials are missing on first use
        """
        if self._toolkit is not None:
            return self._toolkit
        if self._pending is None:
            if not has_credentials():
                raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
            self._pending = asyncio.ensure_future(self._construct())
            self._pending.add_done_callback(self._forget_cancelled)
        # Shield so one caller abandoning its request does not cancel the shared build
        return await asyncio.shield(self._pending)

    @override
    async def get_client(self) -> Any:
        toolkit = await self.get_toolkit()
        # Python toolkits may expose the resource groups directly on the toolkit
        client = getattr(toolkit, "client", None)
        return client if client is not None else toolkit

    @override
    async def get_invoice_resource(self) -> Any:
        client = await self.get_client()
        invoices = getattr(client, "invoices", None)
        if invoices is None:
            raise CapabilityUnavailableError(
                "Invoice operations are unavailable in the Visa Acceptance toolkit client."
            )
        return invoices

    @override
    async def get_payment_link_resource(self) -> Any:
        client = await self.get_client()
        links = getattr(client, "payment_links", None)
        if links is None:
            links = getattr(client, "paymentLinks", None)
        if links is None:
            raise CapabilityUnavailableError(
                "Payment link operations are unavailable in the Visa Acceptance toolkit client."
            )
        return links

    def reset(self) -> None:
        """Forget the memoized toolkit (useful for testing)."""
        self._toolkit = None
        self._pending = None

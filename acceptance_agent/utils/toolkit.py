"""
Helpers for talking to payments toolkit clients whose shape varies by release.

- resolve_toolkit_method: first callable among ordered alias names
- normalise_toolkit_list: unwrap ``{"data": [...]}`` list envelopes
- format_toolkit_error: user-safe message for any raised value
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Optional

GENERIC_TOOLKIT_ERROR = "Unexpected Visa Acceptance toolkit error"

# Ordered alias lists; the first entry is the canonical name.
OPERATION_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    "invoices": {
        "list": ("list", "listInvoices", "list_invoices", "all", "getAll", "get_all"),
        "get": ("get", "retrieve", "getInvoice", "get_invoice"),
        "create": ("create", "createInvoice", "create_invoice"),
        "update": ("update", "updateInvoice", "update_invoice"),
        "send": ("send", "sendInvoice", "send_invoice"),
        "cancel": ("cancel", "cancelInvoice", "cancel_invoice"),
    },
    "payment_links": {
        "list": (
            "list",
            "listPaymentLinks",
            "list_payment_links",
            "all",
            "getAll",
            "get_all",
        ),
        "get": ("get", "retrieve", "getPaymentLink", "get_payment_link"),
        "create": ("create", "createPaymentLink", "create_payment_link"),
        "update": ("update", "updatePaymentLink", "update_payment_link"),
    },
}


def _lookup_member(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    try:
        return getattr(source, name, None)
    except Exception:
        # Properties on third-party objects may raise on access
        return None


def resolve_toolkit_method(
    source: Any, candidates: Sequence[str]
) -> Optional[Callable[..., Any]]:
    """
    Return the first callable member of ``source`` named in ``candidates``.

    Attribute access on an instance already yields a method bound to its
    receiver. Mapping-shaped resources are searched by key. Members that
    exist but are not callable are skipped.

    Args:
        source: Resource handle (object or mapping)
        candidates: Names to try, in priority order

    Returns:
        The resolved callable, or None when no candidate matches
    """
    if source is None:
        return None
    for candidate in candidates:
        member = _lookup_member(source, candidate)
        if member is not None and callable(member):
            return member
    return None


def normalise_toolkit_list(payload: Any) -> Any:
    """Return the list body of ``payload`` or ``payload`` itself when there is none."""
    if isinstance(payload, (list, tuple)):
        return payload
    if isinstance(payload, Mapping):
        data = payload.get("data")
        if isinstance(data, (list, tuple)):
            return data
    return payload


def format_toolkit_error(error: object) -> str:
    """Message of an exception, or a generic fallback for anything else."""
    if isinstance(error, BaseException):
        try:
            message = str(error)
        except Exception:
            return GENERIC_TOOLKIT_ERROR
        return message or GENERIC_TOOLKIT_ERROR
    return GENERIC_TOOLKIT_ERROR


async def call_toolkit_method(method: Callable[..., Any], *args: Any) -> Any:
    """Invoke a resolved operation, awaiting the result when it is awaitable."""
    result = method(*args)
    if inspect.isawaitable(result):
        result = await result
    return result

"""
Record domain entity: read-only view over invoices and payment links.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

TITLE_KEYS = ("customerName", "customer_name", "customer", "name", "title", "label")
STATUS_KEYS = ("status", "state", "lifecycle_state")
DESCRIPTION_KEYS = ("description", "memo", "notes")
DUE_DATE_KEYS = ("dueDate", "due_date", "due", "dueOn")
CURRENCY_KEYS = ("currency", "currencyCode", "currency_code")
URL_KEYS = ("url", "link", "paymentLink", "payment_link")


def extract_string(record: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    """Return the first string value found under ``keys``."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, str):
            return value
    return None


def extract_number(record: Mapping[str, Any], keys: Sequence[str]) -> Optional[float]:
    """Return the first numeric value (or numeric string) found under ``keys``."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                continue
    return None


class PaymentRecord:
    """
    Invoice or payment link as returned by the toolkit.

    The remote service owns the shape; only an identifier is expected and
    every other field is looked up through ordered fallback keys.
    """

    def __init__(self, raw: Mapping[str, Any]):
        self.raw = raw

    @property
    def id(self) -> Optional[str]:
        value = self.raw.get("id")
        return None if value is None else str(value)

    @property
    def title(self) -> Optional[str]:
        return extract_string(self.raw, TITLE_KEYS)

    @property
    def status(self) -> Optional[str]:
        return extract_string(self.raw, STATUS_KEYS)

    @property
    def description(self) -> Optional[str]:
        return extract_string(self.raw, DESCRIPTION_KEYS)

    @property
    def due_date(self) -> Optional[str]:
        return extract_string(self.raw, DUE_DATE_KEYS)

    @property
    def url(self) -> Optional[str]:
        return extract_string(self.raw, URL_KEYS)

    def format_amount(self) -> Optional[str]:
        """
        Render the amount, with its currency code when one is present.

        ``amount`` may be a number, a numeric string, or a nested mapping
        holding ``value``/``amount`` and possibly its own currency.
        """
        raw_amount = self.raw.get("amount")
        nested = raw_amount if isinstance(raw_amount, Mapping) else None

        amount: Optional[float] = None
        if isinstance(raw_amount, bool):
            amount = None
        elif isinstance(raw_amount, (int, float)):
            amount = float(raw_amount)
        elif isinstance(raw_amount, str):
            amount = extract_number({"amount": raw_amount}, ["amount"])
        elif nested is not None:
            amount = extract_number(nested, ["value", "amount"])

        currency = extract_string(self.raw, CURRENCY_KEYS)
        if currency is None and nested is not None:
            currency = extract_string(nested, CURRENCY_KEYS)

        if amount is not None:
            text = f"{amount:,.2f}"
            return f"{text} {currency.upper()}" if currency else text
        if isinstance(raw_amount, str):
            return raw_amount
        return None

    def get_details(self) -> dict[str, Optional[str]]:
        """
        Get a compact summary of the record.

        Returns:
            Dictionary with id, title, status, description, amount, due_date and url
        """
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "description": self.description,
            "amount": self.format_amount(),
            "due_date": self.due_date,
            "url": self.url,
        }

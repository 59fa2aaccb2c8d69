"""Currency setting for the point of sale."""

import structlog
from protean.exceptions import ValidationError

logger = structlog.get_logger(__name__)

DEFAULT_CURRENCY = "SAR"

SUPPORTED_CURRENCIES = {
    "SAR": "Saudi Riyal",
    "USD": "US Dollar",
    "EUR": "Euro",
    "EGP": "Egyptian Pound",
}


def normalize_currency(code):
    """Upper-cased supported code, or None."""
    normalized = str(code or "").strip().upper()
    return normalized if normalized in SUPPORTED_CURRENCIES else None


def set_currency(workspace, code):
    currency = normalize_currency(code)
    if currency is None:
        raise ValidationError({"currency": [f"Unsupported currency: {code}"]})

    workspace.currency = currency
    logger.info("Currency changed", currency=currency)
    return currency


def format_amount(amount, currency):
    return f"{amount:,.2f} {currency}"

"""Errors raised when an inventory operation is rejected.

Shape problems in user input are reported with protean's ``ValidationError``
(``{field: [messages]}``). The classes here cover the remaining outcomes.
Every one of them is raised before any state changes, so a caller that
catches it can rely on the workspace being exactly as it was.
"""


class InventoryError(Exception):
    """Base class for rejected inventory operations."""

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context


class InvariantViolation(InventoryError):
    """The operation would break a structural rule (e.g. removing the last branch)."""


class NotFound(InventoryError):
    """A referenced product, branch or SKU does not resolve."""


class OutOfStock(InventoryError):
    """A product has no stock in any branch."""


class StockInsufficient(InventoryError):
    """One or more cart lines ask for more than their branch holds.

    ``violations`` lists every offending line, not just the first one.
    """

    def __init__(self, violations):
        names = ", ".join(v.product_name or str(v.product_id) for v in violations)
        super().__init__(f"Insufficient stock for: {names}", count=len(violations))
        self.violations = list(violations)


class PersistenceError(InventoryError):
    """A snapshot blob could not be read or written."""


class ScanError(InventoryError):
    """The scanning device produced no payload."""

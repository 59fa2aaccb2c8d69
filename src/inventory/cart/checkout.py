"""Checkout: turn the cart into a stock decrement, all or nothing.

``commit`` re-validates every line against the catalogue as it is now, not
as it was when the line was added: products can be edited or deleted and
branches closed while the cart is open. If any line is short, nothing is
decremented and the cart stays exactly as it was.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String

from inventory.domain import inventory
from inventory.exceptions import StockInsufficient
from inventory.stock.ledger import quantity_at

logger = structlog.get_logger(__name__)


@inventory.value_object
class Violation:
    """A cart line asking for more than its branch holds."""

    product_id = String(required=True, max_length=255)
    product_name = String(max_length=255)
    branch_id = String(required=True, max_length=255)
    requested = Integer(required=True)
    available = Integer(required=True)


@inventory.value_object
class SaleReceipt:
    """Summary of a committed sale."""

    line_count = Integer(required=True)
    units = Integer(required=True)
    total = Float(required=True)
    currency = String(required=True, max_length=3)


def _products_by_id(products):
    return {str(p.id): p for p in products}


def validate_for_commit(cart, products):
    """List a Violation for every line that its branch cannot cover.

    A line whose product or branch no longer exists counts as 0 available.
    """
    catalogue = _products_by_id(products)
    violations = []
    for line in cart.lines:
        product = catalogue.get(str(line.product_id))
        available = quantity_at(product, line.branch_id) if product is not None else 0
        if line.quantity > available:
            violations.append(
                Violation(
                    product_id=str(line.product_id),
                    product_name=product.name if product is not None else None,
                    branch_id=str(line.branch_id),
                    requested=line.quantity,
                    available=available,
                )
            )
    return violations


def cart_total(workspace):
    """Sum of price × quantity, priced from the current catalogue."""
    catalogue = _products_by_id(workspace.products)
    total = 0.0
    for line in workspace.cart.lines:
        product = catalogue.get(str(line.product_id))
        total += (product.price if product is not None else 0.0) * line.quantity
    return round(total, 2)


def commit(workspace):
    """Validate the whole cart, then decrement every line and empty the cart."""
    cart = workspace.cart
    if not cart.lines:
        raise ValidationError({"cart": ["Cannot complete a sale with an empty cart"]})

    violations = validate_for_commit(cart, workspace.products)
    if violations:
        logger.warning(
            "Sale rejected: insufficient stock",
            cart_id=str(cart.id),
            violations=[(v.product_id, v.branch_id, v.requested, v.available) for v in violations],
        )
        raise StockInsufficient(violations)

    receipt = SaleReceipt(
        line_count=len(cart.lines),
        units=sum(line.quantity for line in cart.lines),
        total=cart_total(workspace),
        currency=workspace.currency,
    )

    catalogue = _products_by_id(workspace.products)
    for line in cart.lines:
        catalogue[str(line.product_id)].decrement(line.branch_id, line.quantity)

    cart.complete_sale(units=receipt.units, total=receipt.total, currency=receipt.currency)

    logger.info(
        "Sale completed",
        cart_id=str(cart.id),
        line_count=receipt.line_count,
        units=receipt.units,
        total=receipt.total,
        currency=receipt.currency,
    )
    return receipt

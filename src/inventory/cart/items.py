"""Cart line operations at the register.

Adding an item only checks that the product is stocked somewhere. Whether
the chosen branch holds enough is decided at checkout, so a clerk scanning
quickly is never blocked mid-scan.

The cart is held on the Workspace, not in a repository, so these are plain
functions over it rather than command handlers.
"""

import structlog

from inventory.exceptions import NotFound, OutOfStock
from inventory.product.management import find_product, find_product_by_sku
from inventory.stock.ledger import first_available_branch
from inventory.utils.numbers import coerce_quantity

logger = structlog.get_logger(__name__)

_UNSET = object()


def add_to_cart(workspace, product_id):
    """Put one unit of a product in the cart.

    An existing line grows by one without a stock check. A new line is bound
    to the first branch holding stock. Unknown products are ignored.
    """
    product = find_product(workspace, product_id)
    if product is None:
        logger.debug("Ignored add for unknown product", product_id=str(product_id))
        return None

    cart = workspace.cart
    if cart.line_for(product.id) is not None:
        cart.increment(product.id)
    else:
        branch_id = first_available_branch(product)
        if branch_id is None:
            logger.warning("Product out of stock in every branch", product_id=str(product.id), sku=product.sku)
            raise OutOfStock(f"{product.name} is not available in any branch", product_id=str(product.id))
        cart.add_line(product.id, branch_id)

    line = cart.line_for(product.id)
    logger.info("Added to cart", product_id=str(product.id), branch_id=str(line.branch_id), quantity=line.quantity)
    return line


def add_to_cart_by_sku(workspace, sku):
    """Look a product up by SKU (ignoring case) and add it; returns the product."""
    if not str(sku or "").strip():
        return None

    product = find_product_by_sku(workspace, sku)
    if product is None:
        logger.warning("No product with SKU", sku=sku)
        raise NotFound(f"No product with SKU {sku}", sku=sku)

    add_to_cart(workspace, product.id)
    return product


def update_line(workspace, product_id, quantity=_UNSET, branch_id=_UNSET):
    """Set a line's quantity and/or branch from freeform input.

    Negative or unparseable quantities become 0, which removes the line.
    """
    cart = workspace.cart
    if cart.line_for(product_id) is None:
        raise NotFound(f"Product {product_id} is not in the cart", product_id=product_id)

    changes = {}
    if quantity is not _UNSET and quantity is not None:
        changes["quantity"] = max(0, coerce_quantity(quantity))
    if branch_id is not _UNSET and branch_id:
        changes["branch_id"] = str(branch_id)

    cart.update_line(product_id, **changes)
    return cart.line_for(product_id)


def remove_line(workspace, product_id):
    return update_line(workspace, product_id, quantity=0)

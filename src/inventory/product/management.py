"""Product maintenance operations over a workspace.

These are plain functions taking the Workspace as their first argument
rather than command and handler pairs: the catalogue lives in one owned
object with no repository behind it, so there is nothing for a handler to
load or persist. ``InventorySession`` is the caller that saves.
"""

from collections.abc import Mapping

import structlog
from protean.exceptions import ValidationError

from inventory.exceptions import NotFound
from inventory.product.editing import reset_form
from inventory.product.product import Product
from inventory.utils.numbers import coerce_number, coerce_quantity

logger = structlog.get_logger(__name__)


def upsert_product(workspace, data, editing_id=None):
    """Create a product, or replace the one identified by ``editing_id``.

    ``data`` carries ``name``, ``sku``, ``price``, ``description`` and
    ``stock`` (a mapping of branch id to quantity). The stock list is built
    from the current branches: missing branches get 0, ids that are not a
    current branch are ignored. An edit keeps the product's position.
    """
    name = str(data.get("name") or "").strip()
    sku = str(data.get("sku") or "").strip()
    price = coerce_number(data.get("price"))
    supplied = data.get("stock") or {}

    errors = {}
    if not isinstance(supplied, Mapping):
        errors.setdefault("stock", []).append("Stock must map branch ids to quantities")
        supplied = {}
    if not name:
        errors.setdefault("name", []).append("Product name is required")
    if not sku:
        errors.setdefault("sku", []).append("SKU is required")
    if price < 0:
        errors.setdefault("price", []).append("Price cannot be negative")

    quantities = []
    for branch in workspace.branches:
        quantity = coerce_quantity(supplied.get(str(branch.id), 0))
        if quantity < 0:
            errors.setdefault("stock", []).append(f"Quantity for branch {branch.name} cannot be negative")
        quantities.append((str(branch.id), quantity))

    if errors:
        logger.warning("Product rejected", errors=errors, editing_id=editing_id)
        raise ValidationError(errors)

    index = workspace.product_index(editing_id) if editing_id is not None else None

    product = Product.create(
        name=name,
        sku=sku,
        price=price,
        description=str(data.get("description") or ""),
        quantities=quantities,
        product_id=workspace.products[index].id if index is not None else None,
    )

    if index is not None:
        workspace.products[index] = product
        logger.info("Product updated", product_id=str(product.id), sku=sku)
    else:
        workspace.products.append(product)
        logger.info("Product created", product_id=str(product.id), sku=sku)
    return product


def delete_product(workspace, product_id):
    """Remove a product; an open edit session on it is closed."""
    index = workspace.product_index(product_id)
    if index is None:
        raise NotFound(f"Product {product_id} not found", product_id=product_id)

    product = workspace.products.pop(index)
    if workspace.editing_id is not None and str(workspace.editing_id) == str(product_id):
        reset_form(workspace)

    logger.info("Product deleted", product_id=str(product.id), sku=product.sku)
    return product


def find_product(workspace, product_id):
    index = workspace.product_index(product_id)
    return workspace.products[index] if index is not None else None


def find_product_by_sku(workspace, sku):
    """First product whose SKU matches ``sku`` ignoring case.

    SKUs are not unique; duplicates resolve to the earliest product.
    """
    wanted = str(sku or "").strip().casefold()
    if not wanted:
        return None
    return next((p for p in workspace.products if (p.sku or "").casefold() == wanted), None)


def submit_form(workspace):
    """Save the catalogue form (as an edit when one is open) and clear it."""
    product = upsert_product(workspace, workspace.form, editing_id=workspace.editing_id)
    reset_form(workspace)
    return product

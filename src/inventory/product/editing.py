"""Catalogue form state: the draft being typed in and the product being edited.

The form is a plain mapping shaped like the ``upsert_product`` input:
``name``, ``sku``, ``price``, ``description`` and ``stock`` keyed by branch id.
"""

from inventory.exceptions import NotFound
from inventory.stock.ledger import quantity_at


def empty_form(branches):
    return {
        "name": "",
        "sku": "",
        "price": 0.0,
        "description": "",
        "stock": {str(b.id): 0 for b in branches},
    }


def sync_form_stock(form, branches):
    """Re-key the form's stock map to ``branches``, keeping typed-in values."""
    current = form.get("stock") or {}
    form["stock"] = {str(b.id): current.get(str(b.id), 0) for b in branches}


def reset_form(workspace):
    workspace.editing_id = None
    workspace.form = empty_form(workspace.branches)


def begin_edit(workspace, product_id):
    """Load a product into the form and mark it as the one being edited."""
    index = workspace.product_index(product_id)
    if index is None:
        raise NotFound(f"Product {product_id} not found", product_id=product_id)

    product = workspace.products[index]
    workspace.editing_id = str(product.id)
    workspace.form = {
        "name": product.name,
        "sku": product.sku,
        "price": product.price,
        "description": product.description or "",
        "stock": {str(b.id): quantity_at(product, b.id) for b in workspace.branches},
    }
    return workspace.form

"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from inventory.domain import inventory


@inventory.event(part_of="Product")
class ProductSaved:
    """A product was created or its details replaced from the catalogue form."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=100)
    price = Float(required=True)
    total_quantity = Integer(required=True)
    saved_at = DateTime(required=True)


@inventory.event(part_of="Product")
class StockReconciled:
    """A product's stock entries were realigned with the branch list."""

    __version__ = 1

    product_id = Identifier(required=True)
    added_branches = Integer(required=True)
    removed_entries = Integer(required=True)
    reconciled_at = DateTime(required=True)


@inventory.event(part_of="Product")
class StockDecremented:
    """Units were taken out of a branch by a completed sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    branch_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    decremented_at = DateTime(required=True)

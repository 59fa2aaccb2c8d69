"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from inventory.domain import inventory


@inventory.event(part_of="Cart")
class CartItemAdded:
    """A product was put in the cart, or its existing line grew by one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    branch_id = Identifier(required=True)
    quantity = Integer(required=True)


@inventory.event(part_of="Cart")
class CartLineUpdated:
    """A cart line's quantity or branch was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    previous_branch_id = Identifier(required=True)
    new_branch_id = Identifier(required=True)


@inventory.event(part_of="Cart")
class CartLineRemoved:
    """A line left the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@inventory.event(part_of="Cart")
class SaleCompleted:
    """The cart was committed: branch stock was decremented and the cart emptied."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_count = Integer(required=True)
    units = Integer(required=True)
    total = Float(required=True)
    currency = String(required=True, max_length=3)
    completed_at = DateTime(required=True)

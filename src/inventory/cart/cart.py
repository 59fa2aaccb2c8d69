"""Cart aggregate — the in-progress sale at the register.

Lines hold only references (product id, branch id) into the catalogue and
are re-resolved on every read. A line exists with a positive quantity or not
at all, and there is at most one line per product.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from inventory.cart.events import CartItemAdded, CartLineRemoved, CartLineUpdated, SaleCompleted
from inventory.domain import inventory

_UNSET = object()


@inventory.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    branch_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@inventory.aggregate
class Cart:
    lines = HasMany(CartLine)
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(line.product_id) for line in self.lines]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"lines": ["A product can appear on only one cart line"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        return cls(updated_at=datetime.now(UTC))

    def line_for(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_line(self, product_id, branch_id):
        """Start a line with one unit drawn from ``branch_id``."""
        if self.line_for(product_id) is not None:
            raise ValidationError({"product_id": ["Product is already in the cart"]})

        self.add_lines(CartLine(product_id=product_id, branch_id=branch_id, quantity=1))
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                branch_id=str(branch_id),
                quantity=1,
            )
        )

    def increment(self, product_id):
        """Add one unit to an existing line; stock is not checked here."""
        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        line.quantity += 1
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                branch_id=str(line.branch_id),
                quantity=line.quantity,
            )
        )

    def update_line(self, product_id, quantity=_UNSET, branch_id=_UNSET):
        """Change a line's quantity and/or branch; a quantity of 0 removes it."""
        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        previous_quantity = line.quantity
        previous_branch_id = str(line.branch_id)
        new_quantity = previous_quantity if quantity is _UNSET else max(0, quantity)
        new_branch_id = previous_branch_id if branch_id is _UNSET or not branch_id else str(branch_id)

        if new_quantity == 0:
            self.remove_line(product_id)
            return

        line.quantity = new_quantity
        line.branch_id = new_branch_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                previous_branch_id=previous_branch_id,
                new_branch_id=new_branch_id,
            )
        )

    def remove_line(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )

    # -------------------------------------------------------------------
    # Sale completion
    # -------------------------------------------------------------------
    def complete_sale(self, units, total, currency):
        """Record the committed sale and empty the cart."""
        if not self.lines:
            raise ValidationError({"cart": ["Cannot complete a sale with an empty cart"]})

        line_count = len(self.lines)
        with atomic_change(self):
            for line in list(self.lines):
                self.remove_lines(line)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            SaleCompleted(
                cart_id=str(self.id),
                line_count=line_count,
                units=units,
                total=total,
                currency=currency,
                completed_at=now,
            )
        )

"""Product aggregate root with its per-branch StockEntry children.

The stock list is the ledger for one product: exactly one entry per branch,
quantities never negative. Entries are only rewritten through the methods
below, each of which changes the whole list inside ``atomic_change`` so the
invariant sees the finished state.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Float, HasMany, String, Text

from inventory.domain import inventory
from inventory.product.events import ProductSaved, StockDecremented, StockReconciled
from inventory.stock.ledger import StockEntry, entry_for, reconcile_stock_entries, total_quantity


@inventory.aggregate
class Product:
    """A sellable item with a price and a per-branch quantity breakdown."""

    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=100)
    price = Float(default=0.0, min_value=0.0)
    description = Text()
    stock = HasMany(StockEntry)

    @invariant.post
    def stock_entries_must_reference_distinct_branches(self):
        branch_ids = [str(e.branch_id) for e in self.stock]
        if len(branch_ids) != len(set(branch_ids)):
            raise ValidationError({"stock": ["A product can hold only one stock entry per branch"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name, sku, price=0.0, description="", quantities=(), product_id=None):
        """Build a product and its stock entries in one step.

        ``quantities`` is an ordered sequence of ``(branch_id, quantity)``
        pairs. Passing ``product_id`` rebuilds an existing product under the
        same identity.
        """
        entries = [StockEntry(branch_id=branch_id, quantity=quantity) for branch_id, quantity in quantities]

        attrs = {"name": name, "sku": sku, "price": price, "description": description or ""}
        if product_id is not None:
            attrs["id"] = product_id
        product = cls(**attrs)

        with atomic_change(product):
            for entry in entries:
                product.add_stock(entry)

        product.raise_(
            ProductSaved(
                product_id=str(product.id),
                name=product.name,
                sku=product.sku,
                price=product.price,
                total_quantity=total_quantity(product),
                saved_at=datetime.now(UTC),
            )
        )
        return product

    # -------------------------------------------------------------------
    # Ledger mutations
    # -------------------------------------------------------------------
    def reconcile_stock(self, branches):
        """Realign stock entries with ``branches``; returns True if anything changed."""
        plan = reconcile_stock_entries(self, branches)
        planned = {branch_id for branch_id, _ in plan}

        kept = set()
        stale = []
        for entry in self.stock:
            branch_id = str(entry.branch_id)
            if branch_id in planned and branch_id not in kept:
                kept.add(branch_id)
            else:
                stale.append(entry)
        missing = [branch_id for branch_id, _ in plan if branch_id not in kept]

        if not stale and not missing:
            return False

        with atomic_change(self):
            for entry in stale:
                self.remove_stock(entry)
            for branch_id in missing:
                self.add_stock(StockEntry(branch_id=branch_id, quantity=0))

        self.raise_(
            StockReconciled(
                product_id=str(self.id),
                added_branches=len(missing),
                removed_entries=len(stale),
                reconciled_at=datetime.now(UTC),
            )
        )
        return True

    def decrement(self, branch_id, amount):
        """Take ``amount`` units out of ``branch_id``.

        Callers validate ``amount`` against the branch quantity first; this
        does not clamp.
        """
        entry = entry_for(self, branch_id)
        if entry is None:
            raise ValidationError({"stock": [f"No stock entry for branch {branch_id}"]})

        previous = entry.quantity
        entry.quantity = previous - amount

        self.raise_(
            StockDecremented(
                product_id=str(self.id),
                branch_id=str(branch_id),
                quantity=amount,
                previous_quantity=previous,
                new_quantity=entry.quantity,
                decremented_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Snapshot format
    # -------------------------------------------------------------------
    def to_snapshot(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "sku": self.sku,
            "price": self.price,
            "description": self.description or "",
            "stock": [{"branchId": str(e.branch_id), "quantity": e.quantity} for e in self.stock],
        }

    @classmethod
    def from_snapshot(cls, data):
        """Rebuild a product from its stored record; raises ValidationError on bad shape."""
        if not isinstance(data, dict):
            raise ValidationError({"product": ["Product record must be an object"]})
        if not data.get("id"):
            raise ValidationError({"id": ["Product id is required"]})

        stock = data.get("stock") or []
        if not isinstance(stock, list) or not all(isinstance(s, dict) for s in stock):
            raise ValidationError({"stock": ["Stock must be a list of branch entries"]})

        entries = [StockEntry(branch_id=s.get("branchId"), quantity=s.get("quantity", 0)) for s in stock]
        product = cls(
            id=str(data["id"]),
            name=data.get("name"),
            sku=data.get("sku"),
            price=data.get("price") or 0.0,
            description=data.get("description") or "",
        )
        with atomic_change(product):
            for entry in entries:
                product.add_stock(entry)
        return product

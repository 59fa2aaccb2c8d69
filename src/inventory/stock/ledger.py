"""Stock Ledger — per-branch quantities embedded in each Product.

A Product holds one StockEntry per branch. The functions here are the read
primitives shared by catalogue maintenance and the point-of-sale cart, plus
``reconcile_stock_entries``, which works out the entry list a product should
hold for a given branch list without touching the product.

A missing entry always reads as quantity 0: products loaded from an older
snapshot may not have entries for branches opened after they were saved.
"""

from protean.fields import Identifier, Integer

from inventory.domain import inventory


@inventory.entity(part_of="Product")
class StockEntry:
    """Quantity of one product held at one branch."""

    branch_id = Identifier(required=True)
    quantity = Integer(default=0, min_value=0)


def entry_for(product, branch_id):
    """The product's StockEntry for ``branch_id``, or None."""
    return next((e for e in product.stock if str(e.branch_id) == str(branch_id)), None)


def quantity_at(product, branch_id):
    entry = entry_for(product, branch_id)
    return entry.quantity if entry is not None else 0


def first_available_branch(product):
    """First branch, in stored entry order, that holds any stock."""
    return next((str(e.branch_id) for e in product.stock if e.quantity > 0), None)


def total_quantity(product):
    return sum(e.quantity for e in product.stock)


def reconcile_stock_entries(product, branches):
    """Return the ``(branch_id, quantity)`` pairs ``product`` should hold.

    Entries for branches that still exist keep their quantity and their
    stored order; entries for removed branches are dropped; branches with no
    entry yet are appended with quantity 0 in branch-list order. Duplicate
    entries for one branch collapse to the first.
    """
    live = [str(b.id) for b in branches]
    live_set = set(live)

    reconciled = []
    seen = set()
    for entry in product.stock:
        branch_id = str(entry.branch_id)
        if branch_id in live_set and branch_id not in seen:
            reconciled.append((branch_id, entry.quantity))
            seen.add(branch_id)

    for branch_id in live:
        if branch_id not in seen:
            reconciled.append((branch_id, 0))
            seen.add(branch_id)

    return reconciled

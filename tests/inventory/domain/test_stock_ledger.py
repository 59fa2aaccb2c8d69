"""Tests for the stock ledger read primitives and entry reconciliation."""

from types import SimpleNamespace

from inventory.branch.branch import default_branches
from inventory.product.product import Product
from inventory.stock.ledger import (
    entry_for,
    first_available_branch,
    quantity_at,
    reconcile_stock_entries,
    total_quantity,
)


def _make_product(quantities):
    return Product.create(name="Widget", sku="W-1", price=10.0, quantities=quantities)


def _stub(*entries):
    """Product-shaped stand-in, used where the real aggregate would refuse the shape."""
    return SimpleNamespace(stock=[SimpleNamespace(branch_id=b, quantity=q) for b, q in entries])


class TestQuantityLookup:
    def test_quantity_at_existing_branch(self):
        product = _make_product([("main", 5), ("jeddah", 2)])
        assert quantity_at(product, "jeddah") == 2

    def test_missing_entry_reads_as_zero(self):
        product = _make_product([("main", 5)])
        assert quantity_at(product, "dammam") == 0
        assert entry_for(product, "dammam") is None

    def test_total_quantity(self):
        product = _make_product([("main", 5), ("jeddah", 2), ("dammam", 0)])
        assert total_quantity(product) == 7

    def test_total_quantity_without_entries(self):
        assert total_quantity(_make_product([])) == 0


class TestFirstAvailableBranch:
    def test_follows_stored_entry_order(self):
        product = _make_product([("dammam", 0), ("jeddah", 4), ("main", 9)])
        assert first_available_branch(product) == "jeddah"

    def test_none_when_nothing_in_stock(self):
        product = _make_product([("main", 0), ("jeddah", 0)])
        assert first_available_branch(product) is None


class TestReconcileStockEntries:
    def test_appends_missing_branches_with_zero(self):
        product = _make_product([("jeddah", 3)])
        plan = reconcile_stock_entries(product, default_branches())
        assert plan == [("jeddah", 3), ("main", 0), ("dammam", 0)]

    def test_drops_entries_for_removed_branches(self):
        product = _make_product([("main", 1), ("closed", 7), ("jeddah", 2), ("dammam", 0)])
        plan = reconcile_stock_entries(product, default_branches())
        assert plan == [("main", 1), ("jeddah", 2), ("dammam", 0)]

    def test_collapses_duplicate_entries_to_the_first(self):
        product = _stub(("main", 4), ("main", 9), ("jeddah", 1), ("dammam", 0))
        plan = reconcile_stock_entries(product, default_branches())
        assert plan == [("main", 4), ("jeddah", 1), ("dammam", 0)]

    def test_does_not_touch_the_product(self):
        product = _make_product([("closed", 7)])
        reconcile_stock_entries(product, default_branches())
        assert [(str(e.branch_id), e.quantity) for e in product.stock] == [("closed", 7)]

    def test_every_branch_appears_exactly_once(self):
        product = _stub(("dammam", 2), ("x", 1), ("dammam", 5))
        branches = default_branches()
        plan = reconcile_stock_entries(product, branches)
        assert sorted(b for b, _ in plan) == sorted(str(b.id) for b in branches)

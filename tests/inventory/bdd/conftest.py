"""Shared BDD fixtures and steps for the register and its branches."""

import pytest
from inventory.branch.branch import Branch
from inventory.branch.management import delete_branch
from inventory.cart.checkout import commit
from inventory.cart.items import add_to_cart, update_line
from inventory.currency import format_amount
from inventory.exceptions import InvariantViolation, NotFound, StockInsufficient
from inventory.product.management import upsert_product
from inventory.stock.ledger import quantity_at
from inventory.workspace import Workspace
from pytest_bdd import given, parsers, then, when


def product_named(register, name):
    return next(p for p in register.products if p.name == name)


def branch_id_for(register, ref):
    """Resolve a branch by id or display name; closed branches resolve to ``ref``."""
    branch = next((b for b in register.branches if ref in (str(b.id), b.name)), None)
    return str(branch.id) if branch is not None else ref


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


@pytest.fixture()
def sale():
    """Container for the receipt of a committed sale."""
    return {"receipt": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a register with a single branch "{branch_id}"'), target_fixture="register")
def single_branch_register(branch_id):
    return Workspace(branches=[Branch.create(branch_id.title(), branch_id=branch_id)])


@given("a register with the default branches", target_fixture="register")
def default_register():
    return Workspace()


@given(parsers.cfparse('a product "{name}" with SKU "{sku}" priced {price:g} holding {qty:d} units at "{branch}"'))
def product_in_stock(register, name, sku, price, qty, branch):
    upsert_product(register, {"name": name, "sku": sku, "price": price, "stock": {branch: qty}})


@given(
    parsers.re(r'"(?P<name>[^"]+)" is restocked to (?P<qty>\d+) units? at "(?P<branch>[^"]+)"'),
    converters={"qty": int},
)
def restock(register, name, qty, branch):
    product = product_named(register, name)
    stock = {str(e.branch_id): e.quantity for e in product.stock}
    stock[branch_id_for(register, branch)] = qty
    upsert_product(
        register,
        {"name": product.name, "sku": product.sku, "price": product.price, "stock": stock},
        editing_id=product.id,
    )


@given(parsers.cfparse('the product "{name}" is added to the cart'))
@when(parsers.cfparse('the product "{name}" is added to the cart'))
def product_added_to_cart(register, name):
    add_to_cart(register, product_named(register, name).id)


@given(parsers.re(r'the cart line for "(?P<name>[^"]+)" is set to (?P<qty>\d+) units?'), converters={"qty": int})
def cart_line_set(register, name, qty):
    update_line(register, product_named(register, name).id, quantity=qty)


@given(parsers.cfparse('the branch "{branch}" is closed'))
def branch_closed(register, branch):
    delete_branch(register, branch_id_for(register, branch))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the sale is committed")
def commit_sale(register, sale, error):
    try:
        sale["receipt"] = commit(register)
    except StockInsufficient as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.re(r"the cart has (?P<count>\d+) lines?"), converters={"count": int})
def cart_line_count(register, count):
    assert len(register.cart.lines) == count


@then("the cart is empty")
def cart_is_empty(register):
    assert register.cart.lines == []


@then(
    parsers.re(r'the cart line for "(?P<name>[^"]+)" asks for (?P<qty>\d+) units? from "(?P<branch>[^"]+)"'),
    converters={"qty": int},
)
def cart_line_asks_for(register, name, qty, branch):
    line = register.cart.line_for(product_named(register, name).id)
    assert line is not None
    assert line.quantity == qty
    assert str(line.branch_id) == branch_id_for(register, branch)


@then(parsers.re(r'"(?P<name>[^"]+)" holds (?P<qty>\d+) units? at "(?P<branch>[^"]+)"'), converters={"qty": int})
def product_holds(register, name, qty, branch):
    assert quantity_at(product_named(register, name), branch_id_for(register, branch)) == qty


@then(parsers.cfparse('"{name}" has a stock entry for every branch'))
def one_entry_per_branch(register, name):
    product = product_named(register, name)
    assert sorted(str(e.branch_id) for e in product.stock) == sorted(str(b.id) for b in register.branches)


@then(parsers.cfparse("the sale succeeds with {units:d} units totalling {amount}"))
def sale_succeeds(sale, error, units, amount):
    assert error["exc"] is None, f"Sale was rejected: {error['exc']}"
    receipt = sale["receipt"]
    assert receipt.units == units
    assert format_amount(receipt.total, receipt.currency) == amount


@then(parsers.cfparse('the sale fails for "{name}" asking {requested:d} with {available:d} available'))
def sale_fails(sale, error, name, requested, available):
    assert sale["receipt"] is None
    assert isinstance(error["exc"], StockInsufficient)
    assert [(v.product_name, v.requested, v.available) for v in error["exc"].violations] == [
        (name, requested, available)
    ]


@then("the action fails because nothing was found")
def fails_not_found(error):
    assert isinstance(error["exc"], NotFound)


@then("the action fails because a branch must remain")
def fails_last_branch(error):
    assert isinstance(error["exc"], InvariantViolation)

"""Everything one register works on, held in a single object.

Branches, products, the open cart and the currency live here together with
the catalogue form and the listing filter. Operations take the workspace as
their first argument; nothing is kept in module globals.
"""

from inventory.branch.branch import default_branches
from inventory.cart.cart import Cart
from inventory.currency import DEFAULT_CURRENCY
from inventory.product.editing import empty_form


class Workspace:
    def __init__(self, branches=None, products=None, cart=None, currency=DEFAULT_CURRENCY):
        self.branches = list(branches) if branches else default_branches()
        self.products = list(products or [])
        self.cart = cart if cart is not None else Cart.create()
        self.currency = currency

        self.editing_id = None
        self.form = empty_form(self.branches)
        self.search_term = ""
        self.sort_option = "name-asc"

    def find_branch(self, branch_id):
        return next((b for b in self.branches if str(b.id) == str(branch_id)), None)

    def product_index(self, product_id):
        if product_id is None:
            return None
        return next((i for i, p in enumerate(self.products) if str(p.id) == str(product_id)), None)

    def aggregates(self):
        return [self.cart, *self.branches, *self.products]

    def drain_events(self):
        """Collect the events raised on every held aggregate and clear them."""
        events = []
        for aggregate in self.aggregates():
            events.extend(aggregate._events)
            aggregate._events.clear()
        return events

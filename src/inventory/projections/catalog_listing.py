"""Catalogue listing — filtered, sorted read view over the product list.

Recomputed on demand from the workspace; it never mutates products. Ties
keep catalogue order in both directions.
"""

from typing import NamedTuple

from protean.exceptions import ValidationError

from inventory.stock.ledger import total_quantity

SORT_KEYS = {
    "name": lambda p: (p.name or "").casefold(),
    "sku": lambda p: (p.sku or "").casefold(),
    "quantity": total_quantity,
}
SORT_DIRECTIONS = ("asc", "desc")


class CatalogListing(NamedTuple):
    products: list
    total_quantity: int


def _matches(product, term):
    return term in (product.name or "").casefold() or term in (product.sku or "").casefold()


def catalog_listing(products, search_term="", sort_option="name-asc"):
    """Products whose name or SKU contains ``search_term``, sorted by ``sort_option``.

    ``sort_option`` is ``<name|sku|quantity>-<asc|desc>``.
    """
    key, _, direction = str(sort_option or "").partition("-")
    if key not in SORT_KEYS or direction not in SORT_DIRECTIONS:
        raise ValidationError({"sort_option": [f"Unknown sort option: {sort_option}"]})

    term = str(search_term or "").casefold()
    matched = [p for p in products if _matches(p, term)]
    ordered = sorted(matched, key=SORT_KEYS[key], reverse=direction == "desc")

    return CatalogListing(products=ordered, total_quantity=sum(total_quantity(p) for p in ordered))

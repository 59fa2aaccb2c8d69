"""Loading and saving the workspace snapshot, the only durable state.

Three independent blobs: the product list (JSON array), the branch list
(JSON array) and the currency code (plain text). Each blob loads on its own;
a missing or malformed blob falls back to its default without affecting the
others. Saving always writes the whole snapshot.
"""

import json

import structlog
from protean.exceptions import ValidationError

from inventory.branch.branch import Branch, default_branches
from inventory.currency import DEFAULT_CURRENCY, normalize_currency
from inventory.exceptions import PersistenceError
from inventory.product.product import Product
from inventory.workspace import Workspace

logger = structlog.get_logger(__name__)

PRODUCTS_KEY = "inventory_products"
BRANCHES_KEY = "inventory_branches"
CURRENCY_KEY = "inventory_currency"


def _decode_records(raw, key):
    try:
        records = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceError(f"{key} is not valid JSON: {exc}", key=key) from exc
    if not isinstance(records, list):
        raise PersistenceError(f"{key} must hold a JSON array", key=key)
    return records


def _build(records, key, factory):
    try:
        items = [factory(record) for record in records]
    except ValidationError as exc:
        raise PersistenceError(f"{key} holds an invalid record: {exc}", key=key) from exc

    ids = [str(item.id) for item in items]
    if len(ids) != len(set(ids)):
        raise PersistenceError(f"{key} holds duplicate ids", key=key)
    return items


def parse_branches(raw):
    branches = _build(_decode_records(raw, BRANCHES_KEY), BRANCHES_KEY, Branch.from_snapshot)
    if not branches:
        raise PersistenceError(f"{BRANCHES_KEY} holds no branches", key=BRANCHES_KEY)
    return branches


def parse_products(raw):
    return _build(_decode_records(raw, PRODUCTS_KEY), PRODUCTS_KEY, Product.from_snapshot)


def parse_currency(raw):
    currency = normalize_currency(raw)
    if currency is None:
        raise PersistenceError(f"{CURRENCY_KEY} holds an unsupported code: {raw!r}", key=CURRENCY_KEY)
    return currency


def _load_blob(store, key, parse, default):
    try:
        raw = store.get(key)
        if raw is None:
            return default()
        return parse(raw)
    except PersistenceError as exc:
        logger.error("Snapshot blob unusable, falling back to default", key=key, error=exc.message)
        return default()


def load_workspace(store):
    """Build a workspace from the stored snapshot, blob by blob."""
    branches = _load_blob(store, BRANCHES_KEY, parse_branches, default_branches)
    products = _load_blob(store, PRODUCTS_KEY, parse_products, list)
    currency = _load_blob(store, CURRENCY_KEY, parse_currency, lambda: DEFAULT_CURRENCY)

    logger.info("Workspace loaded", branches=len(branches), products=len(products), currency=currency)
    return Workspace(branches=branches, products=products, currency=currency)


def save_workspace(store, workspace):
    """Write the full snapshot in one store call; raises PersistenceError if the store fails.

    A failed write leaves the previously stored snapshot in place.
    """
    blobs = {
        PRODUCTS_KEY: json.dumps([p.to_snapshot() for p in workspace.products], ensure_ascii=False),
        BRANCHES_KEY: json.dumps([b.to_snapshot() for b in workspace.branches], ensure_ascii=False),
        CURRENCY_KEY: workspace.currency,
    }
    store.put_many(blobs)

    logger.debug("Workspace saved", products=len(workspace.products), branches=len(workspace.branches))

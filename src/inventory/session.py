"""The single writer over one workspace.

Loads the snapshot once, runs each operation to completion, and writes the
whole snapshot back after every operation that changes catalogue data. A
failed write is logged and kept on ``last_save_error``; the in-memory change
stands and the next successful write catches the store up.

Domain events raised by an operation are drained from the aggregates once
it finishes and kept on ``last_events`` until the next operation.

The ``inventory`` domain must be initialized and its context active while a
session is in use:

    inventory.init()
    with inventory.domain_context():
        session = InventorySession.open(FileBlobStore("data"))
"""

import structlog
from protean.exceptions import ValidationError

from inventory.branch.management import add_branch, delete_branch
from inventory.cart.checkout import cart_total, commit
from inventory.cart.items import add_to_cart, add_to_cart_by_sku, remove_line, update_line
from inventory.currency import set_currency
from inventory.exceptions import InventoryError, PersistenceError
from inventory.persistence.snapshot import load_workspace, save_workspace
from inventory.product.editing import begin_edit, reset_form
from inventory.product.management import delete_product, submit_form, upsert_product
from inventory.projections.catalog_listing import catalog_listing
from inventory.scanning.dispatch import ScanTask, dispatch_scan

logger = structlog.get_logger(__name__)


class InventorySession:
    def __init__(self, workspace, store):
        self.workspace = workspace
        self.store = store
        self.last_save_error = None
        self.last_events = []

    @classmethod
    def open(cls, store):
        return cls(load_workspace(store), store)

    # -------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------
    def _apply(self, operation, *args, persist=True, **kwargs):
        try:
            result = operation(self.workspace, *args, **kwargs)
        except (ValidationError, InventoryError) as exc:
            logger.warning("Operation rejected", operation=operation.__name__, error=str(exc))
            raise
        finally:
            self._publish_events(operation.__name__)

        if persist:
            self.save()
        return result

    def _publish_events(self, operation_name):
        """Drain events raised during the operation onto ``last_events``."""
        self.last_events = self.workspace.drain_events()
        for event in self.last_events:
            logger.debug("Domain event", operation=operation_name, event=type(event).__name__)

    def save(self):
        """Write the full snapshot; returns False if the store refused it."""
        try:
            save_workspace(self.store, self.workspace)
        except PersistenceError as exc:
            logger.error("Snapshot save failed", error=exc.message)
            self.last_save_error = exc
            return False

        self.last_save_error = None
        return True

    # -------------------------------------------------------------------
    # Catalogue
    # -------------------------------------------------------------------
    def upsert_product(self, data, editing_id=None):
        return self._apply(upsert_product, data, editing_id=editing_id)

    def delete_product(self, product_id):
        return self._apply(delete_product, product_id)

    def begin_edit(self, product_id):
        return self._apply(begin_edit, product_id, persist=False)

    def reset_form(self):
        return self._apply(reset_form, persist=False)

    def submit_form(self):
        return self._apply(submit_form)

    def add_branch(self, name):
        return self._apply(add_branch, name)

    def delete_branch(self, branch_id):
        return self._apply(delete_branch, branch_id)

    def set_currency(self, code):
        return self._apply(set_currency, code)

    def listing(self):
        return catalog_listing(self.workspace.products, self.workspace.search_term, self.workspace.sort_option)

    # -------------------------------------------------------------------
    # Point of sale
    # -------------------------------------------------------------------
    def add_to_cart(self, product_id):
        return self._apply(add_to_cart, product_id, persist=False)

    def add_to_cart_by_sku(self, sku):
        return self._apply(add_to_cart_by_sku, sku, persist=False)

    def update_line(self, product_id, **changes):
        return self._apply(update_line, product_id, persist=False, **changes)

    def remove_line(self, product_id):
        return self._apply(remove_line, product_id, persist=False)

    def cart_total(self):
        return cart_total(self.workspace)

    def commit(self):
        return self._apply(commit)

    # -------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------
    def start_scan(self, target, scanner):
        """Begin a scan; must be called with an event loop running."""
        return ScanTask(scanner, target).start()

    async def finish_scan(self, task):
        """Await a started scan and feed its payload through ``dispatch_scan``.

        A cancelled or failed scan changes nothing and returns None.
        """
        result = await task.result()
        if not result.ok:
            logger.info("Scan ended without payload", target=result.target.value, reason=str(result.error))
            return None
        return self._apply(dispatch_scan, result.target, result.payload, persist=False)

    async def scan(self, target, scanner):
        return await self.finish_scan(self.start_scan(target, scanner))

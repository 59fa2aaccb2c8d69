"""Inventory bounded context — Multi-branch Stock Ledger and Point of Sale.

Handles the product catalogue with per-branch stock, branch maintenance, and
the point-of-sale cart that validates against the ledger and commits a sale
as a single stock decrement.
"""

from protean.domain import Domain

from inventory.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
inventory = Domain(name="inventory")

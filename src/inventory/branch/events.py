"""Domain events for the Branch aggregate."""

from protean.fields import DateTime, Identifier, String

from inventory.domain import inventory


@inventory.event(part_of="Branch")
class BranchAdded:
    """A new stock-holding location was opened."""

    __version__ = 1

    branch_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    added_at = DateTime(required=True)

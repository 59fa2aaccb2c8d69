"""Branch aggregate — a physical location (store or warehouse) that holds stock.

Branches carry no quantities themselves. Every Product keeps one StockEntry
per branch; keeping those entries in step with the branch list is the job of
``inventory.branch.management``.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import String

from inventory.branch.events import BranchAdded
from inventory.domain import inventory

DEFAULT_BRANCHES = (
    {"id": "main", "name": "Main Branch"},
    {"id": "jeddah", "name": "Jeddah Warehouse"},
    {"id": "dammam", "name": "Dammam Branch"},
)


@inventory.aggregate
class Branch:
    """A stock-holding location."""

    name = String(required=True, max_length=255)

    @classmethod
    def create(cls, name, branch_id=None):
        """Open a new branch. ``name`` is stripped and must not be blank."""
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Branch name is required"]})

        attrs = {"name": name}
        if branch_id is not None:
            attrs["id"] = branch_id
        branch = cls(**attrs)

        branch.raise_(
            BranchAdded(
                branch_id=str(branch.id),
                name=name,
                added_at=datetime.now(UTC),
            )
        )
        return branch

    def to_snapshot(self):
        return {"id": str(self.id), "name": self.name}

    @classmethod
    def from_snapshot(cls, data):
        if not isinstance(data, dict):
            raise ValidationError({"branch": ["Branch record must be an object"]})
        if not data.get("id"):
            raise ValidationError({"id": ["Branch id is required"]})
        return cls(id=str(data["id"]), name=data.get("name"))


def default_branches():
    """Fresh Branch aggregates for the seeded branch list."""
    return [Branch(id=b["id"], name=b["name"]) for b in DEFAULT_BRANCHES]

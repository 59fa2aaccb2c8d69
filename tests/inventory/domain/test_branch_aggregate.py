"""Tests for Branch aggregate."""

import pytest
from inventory.branch.branch import DEFAULT_BRANCHES, Branch, default_branches
from inventory.branch.events import BranchAdded
from protean.exceptions import ValidationError


class TestBranchCreation:
    def test_create_sets_name(self):
        branch = Branch.create("Riyadh Store")
        assert branch.name == "Riyadh Store"

    def test_create_strips_name(self):
        branch = Branch.create("  Riyadh Store  ")
        assert branch.name == "Riyadh Store"

    def test_create_generates_id(self):
        branch = Branch.create("Riyadh Store")
        assert branch.id is not None

    def test_create_accepts_explicit_id(self):
        branch = Branch.create("Riyadh Store", branch_id="riyadh")
        assert str(branch.id) == "riyadh"

    def test_generated_ids_are_unique(self):
        assert Branch.create("A").id != Branch.create("B").id

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_is_rejected(self, name):
        with pytest.raises(ValidationError) as exc_info:
            Branch.create(name)
        assert "name" in exc_info.value.messages

    def test_create_raises_branch_added_event(self):
        branch = Branch.create("Riyadh Store")
        added = [e for e in branch._events if isinstance(e, BranchAdded)]
        assert len(added) == 1
        assert added[0].branch_id == str(branch.id)
        assert added[0].name == "Riyadh Store"


class TestDefaultBranches:
    def test_seeded_in_order(self):
        branches = default_branches()
        assert [str(b.id) for b in branches] == ["main", "jeddah", "dammam"]
        assert [b.name for b in branches] == [b["name"] for b in DEFAULT_BRANCHES]

    def test_each_call_returns_fresh_aggregates(self):
        first, second = default_branches(), default_branches()
        assert first[0] is not second[0]


class TestBranchSnapshot:
    def test_to_snapshot(self):
        branch = Branch.create("Riyadh Store", branch_id="riyadh")
        assert branch.to_snapshot() == {"id": "riyadh", "name": "Riyadh Store"}

    def test_from_snapshot(self):
        branch = Branch.from_snapshot({"id": "riyadh", "name": "Riyadh Store"})
        assert str(branch.id) == "riyadh"
        assert branch.name == "Riyadh Store"

    def test_from_snapshot_requires_id(self):
        with pytest.raises(ValidationError):
            Branch.from_snapshot({"name": "Riyadh Store"})

    def test_from_snapshot_requires_name(self):
        with pytest.raises(ValidationError):
            Branch.from_snapshot({"id": "riyadh"})

    def test_from_snapshot_rejects_non_object(self):
        with pytest.raises(ValidationError):
            Branch.from_snapshot(["riyadh", "Riyadh Store"])

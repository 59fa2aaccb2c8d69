import pytest
from protean.integrations.pytest import DomainFixture

from inventory.persistence.memory_adapter import MemoryBlobStore
from inventory.product.management import upsert_product
from inventory.workspace import Workspace


@pytest.fixture(scope="session")
def inventory_bed():
    from inventory.domain import inventory

    bed = DomainFixture(inventory)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(inventory_bed):
    with inventory_bed.domain_context():
        yield


@pytest.fixture
def workspace():
    """Fresh workspace seeded with the default branches (main, jeddah, dammam)."""
    return Workspace()


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def make_product(workspace):
    """Create a product in ``workspace`` with stock given per branch as keyword args."""

    def _make(name="Widget", sku="W-1", price=10.0, **stock):
        return upsert_product(workspace, {"name": name, "sku": sku, "price": price, "stock": stock})

    return _make

"""In-process blob store for development and testing."""

from inventory.exceptions import PersistenceError
from inventory.persistence.port import BlobStore


class MemoryBlobStore(BlobStore):
    """Dictionary-backed store that can be told to fail on write."""

    def __init__(self, blobs: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(blobs or {})
        self.fail_writes: bool = False

    def get(self, key: str) -> str | None:
        return self.blobs.get(key)

    def put_many(self, blobs: dict[str, str]) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Storage unavailable for {', '.join(blobs)}", keys=list(blobs))
        self.blobs.update(blobs)

"""Blob store port (abstract interface).

The snapshot is kept as a few independent text blobs under fixed keys. Any
key-value backend can hold them; adapters translate their own failures into
``PersistenceError``.
"""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Abstract keyed text storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the blob stored under ``key``, or None when absent."""
        ...

    @abstractmethod
    def put_many(self, blobs: dict[str, str]) -> None:
        """Store every blob in ``blobs`` together.

        If the write fails, the previously stored blobs must be left as they
        were. A snapshot is never stored half old and half new.
        """
        ...

    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous blob."""
        self.put_many({key: value})

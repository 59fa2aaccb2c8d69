"""Directory-backed blob store: one file per key.

Writes go through a staging step. Every blob is first written to a hidden
temporary file beside its target; only when all of them are on disk are
they moved into place. If a move fails part way, the blobs already moved
are put back to their previous contents.
"""

import os
from pathlib import Path

import structlog

from inventory.exceptions import PersistenceError
from inventory.persistence.port import BlobStore

logger = structlog.get_logger(__name__)

DATA_DIR_ENV = "BRANCHSTOCK_DATA_DIR"


class FileBlobStore(BlobStore):
    """Keeps each blob in ``<directory>/<key>``."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory or os.getenv(DATA_DIR_ENV) or "data")

    def _path(self, key: str) -> Path:
        return self.directory / key

    def _staging_path(self, key: str) -> Path:
        return self.directory / f".{key}.tmp"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"Cannot read {key}: {exc}", key=key) from exc

    def put_many(self, blobs: dict[str, str]) -> None:
        staged = self._stage(blobs)
        try:
            previous = {key: self.get(key) for key in staged}
        except PersistenceError:
            self._discard(staged)
            raise

        moved = []
        try:
            for key in staged:
                os.replace(self._staging_path(key), self._path(key))
                moved.append(key)
        except OSError as exc:
            self._restore(moved, previous)
            self._discard(key for key in staged if key not in moved)
            raise PersistenceError(f"Cannot write {', '.join(blobs)}: {exc}", keys=list(blobs)) from exc

    def _stage(self, blobs):
        staged = []
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            for key, value in blobs.items():
                self._staging_path(key).write_text(value, encoding="utf-8")
                staged.append(key)
        except OSError as exc:
            self._discard(staged)
            raise PersistenceError(f"Cannot write {', '.join(blobs)}: {exc}", keys=list(blobs)) from exc
        return staged

    def _discard(self, keys):
        for key in keys:
            try:
                self._staging_path(key).unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove staged blob", key=key)

    def _restore(self, keys, previous):
        for key in keys:
            try:
                if previous[key] is None:
                    self._path(key).unlink(missing_ok=True)
                else:
                    self._path(key).write_text(previous[key], encoding="utf-8")
            except OSError as exc:
                logger.error("Could not restore blob after failed write", key=key, error=str(exc))

"""Zip archive sink — write-once entries grouped into per-route folders."""

from __future__ import annotations

import logging
import threading
import zipfile
from pathlib import Path

from pydantic import BaseModel

from page_comparer.errors import WriteFailure
from page_comparer.url_utils import entry_key

logger = logging.getLogger(__name__)


class ArchiveEntry(BaseModel):
    folder: str
    file_name: str
    content: bytes | str

    @property
    def key(self) -> str:
        return entry_key(self.folder, self.file_name)


class ZipArchiveSink:
    """Single shared output archive for a run.

    Use as a context manager; the archive is closed on every exit path.
    Writes are serialized, and an entry name may only be written once.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._zip: zipfile.ZipFile | None = None
        self._lock = threading.Lock()
        self._keys: set[str] = set()

    def __enter__(self) -> "ZipArchiveSink":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.close()
        except WriteFailure as e:
            if exc_type is None:
                raise
            # Keep the in-flight error as the one that propagates.
            logger.error("Archive close failed during %s: %s", exc_type.__name__, e)

    def open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._zip = zipfile.ZipFile(self.path, "w", compression=zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise WriteFailure(f"Cannot create archive {self.path}: {e}") from e
        logger.debug("Opened archive %s", self.path)

    def close(self) -> None:
        with self._lock:
            if self._zip is None:
                return
            try:
                self._zip.close()
            except OSError as e:
                raise WriteFailure(f"Cannot finalize archive {self.path}: {e}") from e
            finally:
                self._zip = None
        logger.debug("Closed archive %s (%d entries)", self.path, len(self._keys))

    @property
    def keys(self) -> set[str]:
        return set(self._keys)

    def write_entry(self, folder: str, file_name: str, content: bytes | str) -> None:
        """Write a single entry."""
        self.commit([ArchiveEntry(folder=folder, file_name=file_name, content=content)])

    def commit(self, entries: list[ArchiveEntry]) -> None:
        """Write a batch of entries. Duplicate names are rejected before anything is written."""
        with self._lock:
            if self._zip is None:
                raise WriteFailure(f"Archive {self.path} is not open")

            batch_keys = [e.key for e in entries]
            duplicates = sorted(
                {k for k in batch_keys if k in self._keys or batch_keys.count(k) > 1}
            )
            if duplicates:
                raise ValueError(f"Archive entries already written: {', '.join(duplicates)}")

            for entry in entries:
                data = entry.content.encode("utf-8") if isinstance(entry.content, str) else entry.content
                try:
                    self._zip.writestr(entry.key, data)
                except (OSError, ValueError) as e:
                    raise WriteFailure(f"Cannot write {entry.key} to {self.path}: {e}") from e
                self._keys.add(entry.key)

        logger.debug("Committed %d entries to %s", len(entries), self.path)

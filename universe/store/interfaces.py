"""Document store contract.

Repositories and the live caches depend only on this shape, so the backing
store (in-memory here, a hosted document database in production) stays
swappable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Protocol

Fields = dict[str, Any]


class Cancelable(Protocol):
    def cancel(self) -> None: ...


def document_path(collection: str, doc_id: str) -> str:
    if not collection or not doc_id or "/" in doc_id:
        raise ValueError(f"Invalid document path: {collection!r}/{doc_id!r}")
    return f"{collection}/{doc_id}"


def split_path(path: str) -> tuple[str, str]:
    collection, sep, doc_id = path.rpartition("/")
    if not sep or not collection or not doc_id:
        raise ValueError(f"Invalid document path: {path!r}")
    return collection, doc_id


@dataclass(frozen=True)
class Document:
    """Snapshot of a single document; ``data`` is None when it does not exist.

    ``version`` grows with every write to the path, deletes included, so a
    listener can tell a late snapshot from a newer one. 0 means never written.
    """

    path: str
    data: Fields | None = None
    version: int = 0

    @property
    def id(self) -> str:
        return split_path(self.path)[1]

    @property
    def exists(self) -> bool:
        return self.data is not None


SnapshotCallback = Callable[[Document], None]
ErrorCallback = Callable[[BaseException], None]


class DocumentStore(ABC):
    """Keyed storage of structured records with per-document change listeners."""

    @abstractmethod
    def get(self, path: str) -> Document:
        """Return the document at *path*; a missing document has ``exists == False``."""
        ...

    @abstractmethod
    def set(self, path: str, fields: Fields) -> None:
        """Create or overwrite the document at *path*."""
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the document at *path*. Deleting a missing document is a no-op."""
        ...

    @abstractmethod
    def query(
        self, collection: str, predicate: Callable[[Fields], bool] | None = None
    ) -> list[Document]:
        """Return the documents of *collection* matching *predicate*, in insertion order."""
        ...

    @abstractmethod
    def add_change_listener(
        self,
        path: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Cancelable:
        """Watch a document.

        *on_snapshot* receives the current snapshot once the listener is
        attached and again after every change. Snapshots of concurrent writes
        may arrive out of order; compare ``Document.version`` to discard stale
        ones. *on_error* is called at most once, when the listener fails for
        good; no snapshots follow it.
        """
        ...

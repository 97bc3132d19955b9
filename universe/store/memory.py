"""In-memory document store."""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from collections import defaultdict
from typing import Callable

from universe.store.interfaces import (
    Document,
    DocumentStore,
    ErrorCallback,
    Fields,
    SnapshotCallback,
    split_path,
)

logger = logging.getLogger(__name__)


class ListenerRegistration:
    """Handle returned by ``add_change_listener``; ``cancel`` detaches it."""

    def __init__(self, store: InMemoryDocumentStore, path: str, token: int) -> None:
        self._store = store
        self._path = path
        self._token = token

    def cancel(self) -> None:
        self._store._remove_listener(self._path, self._token)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store keyed by collection then document id.

    Documents keep their insertion order; overwriting a document does not
    move it. Data is deep-copied on the way in and out so callers never share
    mutable state with the store. Listeners are called synchronously, in
    registration order, outside the store lock. Each snapshot is taken
    together with its write, so it carries that write's version.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, Fields]] = defaultdict(dict)
        self._versions: dict[str, int] = {}
        self._clock = itertools.count(1)
        self._listeners: dict[str, dict[int, tuple[SnapshotCallback, ErrorCallback]]] = (
            defaultdict(dict)
        )
        self._tokens = itertools.count(1)

    def get(self, path: str) -> Document:
        collection, doc_id = split_path(path)
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return Document(
                path=path, data=copy.deepcopy(data), version=self._versions.get(path, 0)
            )

    def set(self, path: str, fields: Fields) -> None:
        collection, doc_id = split_path(path)
        with self._lock:
            self._collections[collection][doc_id] = copy.deepcopy(fields)
            snapshot, callbacks = self._record_write(path)
        self._notify(snapshot, callbacks)

    def delete(self, path: str) -> None:
        collection, doc_id = split_path(path)
        with self._lock:
            removed = self._collections.get(collection, {}).pop(doc_id, None)
            if removed is None:
                return
            snapshot, callbacks = self._record_write(path)
        self._notify(snapshot, callbacks)

    def query(
        self, collection: str, predicate: Callable[[Fields], bool] | None = None
    ) -> list[Document]:
        with self._lock:
            items = list(self._collections.get(collection, {}).items())
            docs = []
            for doc_id, data in items:
                if predicate is not None and not predicate(data):
                    continue
                path = f"{collection}/{doc_id}"
                docs.append(
                    Document(path=path, data=copy.deepcopy(data), version=self._versions[path])
                )
            return docs

    def add_change_listener(
        self,
        path: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> ListenerRegistration:
        split_path(path)
        with self._lock:
            token = next(self._tokens)
            self._listeners[path][token] = (on_snapshot, on_error)
            snapshot = self.get(path)
        on_snapshot(snapshot)
        return ListenerRegistration(self, path, token)

    def fail_listeners(self, path: str, error: BaseException) -> None:
        """Report a fatal backend error to every listener of *path* and detach them."""
        with self._lock:
            listeners = list(self._listeners.pop(path, {}).values())
        logger.warning("Failing %d listener(s) on %s: %s", len(listeners), path, error)
        for _, on_error in listeners:
            on_error(error)

    def listener_count(self, path: str) -> int:
        with self._lock:
            return len(self._listeners.get(path, {}))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _remove_listener(self, path: str, token: int) -> None:
        with self._lock:
            listeners = self._listeners.get(path)
            if listeners is None:
                return
            listeners.pop(token, None)
            if not listeners:
                del self._listeners[path]

    def _record_write(self, path: str) -> tuple[Document, list[SnapshotCallback]]:
        # Caller holds the lock.
        self._versions[path] = next(self._clock)
        callbacks = [cb for cb, _ in self._listeners.get(path, {}).values()]
        return self.get(path), callbacks

    def _notify(self, snapshot: Document, callbacks: list[SnapshotCallback]) -> None:
        for callback in callbacks:
            callback(snapshot)

"""Keyed live-subscription cache.

``LiveEntityCache`` opens at most one external feed per key and shares it
with every observer of that key through a ``SharedStream``. A stream keeps
the latest decoded value and replays it to observers as soon as they
subscribe, so late subscribers never start from an empty state.

Feed lifecycle:

- the first ``get(key)`` opens the feed; concurrent callers for the same key
  all receive the one stream;
- a payload that fails to decode is logged and dropped, the stream keeps its
  previous value and stays open;
- when a ``version`` function is given, a payload no newer than the last one
  seen is dropped, so late deliveries never roll the value back;
- a feed error fails the stream with ``TerminalFeedError`` and evicts the
  key, so the next ``get(key)`` opens a fresh feed;
- observers cancelling their ``Subscription`` never close the feed, only
  ``close()`` does, for every key at once.

Callbacks run on whatever thread delivers the payload, while the stream's
lock is held. They must not block waiting on other streams.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from universe.domain.errors import DecodeError, TerminalFeedError
from universe.store.interfaces import Cancelable

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

ValueCallback = Callable[[Any], None]
ErrorCallback = Callable[[BaseException], None]
OpenFeed = Callable[[Any, ValueCallback, ErrorCallback], Cancelable]

# Errors a decoder may raise for one bad payload.
DECODE_ERRORS = (DecodeError, ValueError, TypeError, KeyError)


@dataclass(frozen=True)
class _Observer:
    on_value: Callable[[Any], None]
    on_error: Callable[[BaseException], None] | None = None
    on_complete: Callable[[], None] | None = None


class Subscription:
    """One observer's attachment to a ``SharedStream``."""

    def __init__(self, stream: SharedStream[Any], token: int) -> None:
        self._stream = stream
        self._token = token

    def cancel(self) -> None:
        self._stream._unsubscribe(self._token)


class SharedStream(Generic[V]):
    """Multicast channel that replays its latest value to new observers."""

    def __init__(self, key: Hashable) -> None:
        self.key = key
        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        self._observers: dict[int, _Observer] = {}
        self._tokens = itertools.count(1)
        self._value: V | None = None
        self._has_value = False
        self._version: int | None = None
        self._error: TerminalFeedError | None = None
        self._closed = False

    def __repr__(self) -> str:
        return f"SharedStream(key={self.key!r}, has_value={self._has_value}, closed={self._closed})"

    @property
    def value(self) -> V | None:
        return self._value

    @property
    def has_value(self) -> bool:
        return self._has_value

    @property
    def error(self) -> TerminalFeedError | None:
        return self._error

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def subscribe(
        self,
        on_value: Callable[[V | None], None],
        on_error: Callable[[BaseException], None] | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> Subscription:
        """Attach an observer.

        The latest value, if any, is delivered before this returns. On a
        stream that already ended the observer also receives the terminal
        error (or completion) straight away.
        """
        observer = _Observer(on_value, on_error, on_complete)
        with self._lock:
            token = next(self._tokens)
            if not self._closed:
                self._observers[token] = observer
            if self._has_value:
                self._call(observer.on_value, self._value)
            if self._closed:
                self._finish(observer)
        return Subscription(self, token)

    def wait(self, timeout: float | None = None) -> V | None:
        """Block until the stream has a value or has ended, and return the value.

        Raises:
            TerminalFeedError: If the feed failed before producing a value.
            TimeoutError: If nothing arrived within *timeout* seconds.
        """
        with self._changed:
            ready = self._changed.wait_for(lambda: self._has_value or self._closed, timeout)
            if not ready:
                raise TimeoutError(f"No value for {self.key!r} within {timeout}s")
            if self._error is not None and not self._has_value:
                raise TerminalFeedError(self.key, self._error.cause)
            return self._value

    # ------------------------------------------------------------------
    # Producer side, driven by LiveEntityCache
    # ------------------------------------------------------------------

    def _emit(self, value: V | None, version: int | None = None) -> None:
        with self._lock:
            if self._closed or not self._advance(version):
                return
            self._value = value
            self._has_value = True
            self._changed.notify_all()
            for observer in list(self._observers.values()):
                self._call(observer.on_value, value)

    def _advance(self, version: int | None) -> bool:
        """Record *version*; False when it is not newer than the last one seen."""
        with self._lock:
            if version is None:
                return True
            if self._version is not None and version <= self._version:
                return False
            self._version = version
            return True

    def _fail(self, error: TerminalFeedError) -> None:
        with self._lock:
            if self._closed:
                return
            self._error = error
            self._end()

    def _complete(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._end()

    def _end(self) -> None:
        self._closed = True
        self._changed.notify_all()
        observers = list(self._observers.values())
        self._observers.clear()
        for observer in observers:
            self._finish(observer)

    def _finish(self, observer: _Observer) -> None:
        if self._error is not None:
            if observer.on_error is not None:
                self._call(observer.on_error, self._error)
        elif observer.on_complete is not None:
            self._call(observer.on_complete)

    def _unsubscribe(self, token: int) -> None:
        with self._lock:
            self._observers.pop(token, None)

    def _call(self, callback: Callable[..., None], *args: Any) -> None:
        # One failing observer must not starve the others.
        try:
            callback(*args)
        except Exception:
            logger.exception("Observer of %r raised", self.key)


class LiveEntityCache(Generic[K, V]):
    """Shares one live feed per key between any number of observers.

    Args:
        open_feed: ``open_feed(key, on_value, on_error)`` starts the external
            subscription and returns a handle whose ``cancel()`` stops it.
            ``on_value`` receives raw payloads, ``on_error`` a fatal error.
        decode: converts one raw payload to ``V`` (or None when the entity
            does not exist). Raising one of ``DECODE_ERRORS`` drops just
            that payload; any other exception terminates the feed.
        version: optional, returns the ordering number of a raw payload.
    """

    def __init__(
        self,
        open_feed: OpenFeed,
        decode: Callable[[Any], V | None],
        name: str = "live-cache",
        version: Callable[[Any], int] | None = None,
    ) -> None:
        self._open_feed = open_feed
        self._decode = decode
        self._version = version
        self.name = name
        self._lock = threading.Lock()
        self._streams: dict[K, SharedStream[V]] = {}
        self._feeds: dict[K, Cancelable] = {}

    def __enter__(self) -> LiveEntityCache[K, V]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __contains__(self, key: object) -> bool:
        return key in self._streams

    def __len__(self) -> int:
        return len(self._streams)

    def get(self, key: K) -> SharedStream[V]:
        """Return the shared stream for *key*, opening its feed on first use."""
        stream = self._streams.get(key)
        if stream is not None:
            return stream
        with self._lock:
            stream = self._streams.get(key)
            if stream is not None:
                return stream
            stream = SharedStream(key)
            self._streams[key] = stream
        logger.info("%s: opening feed for %r", self.name, key)
        self._open(key, stream)
        return stream

    def close(self) -> None:
        """Cancel every feed, complete every stream and empty the registry."""
        with self._lock:
            streams = list(self._streams.values())
            feeds = list(self._feeds.items())
            self._streams.clear()
            self._feeds.clear()
        logger.info("%s: closing %d feed(s)", self.name, len(feeds))
        for key, feed in feeds:
            try:
                feed.cancel()
            except Exception:
                logger.exception("%s: cancelling feed for %r failed", self.name, key)
        for stream in streams:
            stream._complete()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open(self, key: K, stream: SharedStream[V]) -> None:
        try:
            feed = self._open_feed(
                key,
                lambda raw: self._on_value(key, stream, raw),
                lambda error: self._on_error(key, stream, error),
            )
        except Exception as exc:
            logger.exception("%s: opening feed for %r failed", self.name, key)
            self._terminate(key, stream, exc)
            return

        with self._lock:
            registered = self._streams.get(key) is stream
            if registered:
                self._feeds[key] = feed
        if not registered:
            # Failed or closed while the feed was being opened.
            feed.cancel()

    def _on_value(self, key: K, stream: SharedStream[V], raw: Any) -> None:
        version = self._version(raw) if self._version is not None else None
        try:
            value = self._decode(raw)
        except DECODE_ERRORS:
            logger.warning(
                "%s: dropping malformed update for %r", self.name, key, exc_info=True
            )
            # A newer malformed payload still outdates older ones.
            stream._advance(version)
            return
        except Exception as exc:
            logger.exception("%s: decoder failed for %r", self.name, key)
            self._terminate(key, stream, exc)
            return
        stream._emit(value, version)

    def _on_error(self, key: K, stream: SharedStream[V], error: BaseException) -> None:
        logger.error("%s: feed for %r failed: %s", self.name, key, error)
        self._terminate(key, stream, error)

    def _terminate(self, key: K, stream: SharedStream[V], error: BaseException) -> None:
        feed = None
        with self._lock:
            if self._streams.get(key) is stream:
                del self._streams[key]
                feed = self._feeds.pop(key, None)
        stream._fail(TerminalFeedError(key, error))
        if feed is not None:
            feed.cancel()

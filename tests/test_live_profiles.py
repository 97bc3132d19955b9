"""End-to-end tests for live user profiles over the in-memory store."""

from __future__ import annotations

import threading
from datetime import date

import pytest

from universe.domain.errors import TerminalFeedError
from universe.domain.models import SYSTEM_OPENAI_UID, UserProfile
from universe.domain.tags import Tag
from universe.live.profiles import create_user_live_cache
from universe.repos.users import DocumentUserRepository, user_profile_to_document
from universe.store.memory import InMemoryDocumentStore


@pytest.fixture()
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture()
def users(store) -> DocumentUserRepository:
    return DocumentUserRepository(store)


@pytest.fixture()
def cache(store):
    with create_user_live_cache(store) as c:
        yield c


def _make_user(uid: str = "U1", **overrides) -> UserProfile:
    defaults = dict(
        uid=uid,
        username="jdoe",
        first_name="John",
        last_name="Doe",
        country="Switzerland",
        description="Likes concerts",
        date_of_birth=date(1999, 1, 1),
        tags={Tag.ROCK, Tag.HIKING},
    )
    defaults.update(overrides)
    return UserProfile(**defaults)


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


def test_existing_profile_is_delivered_on_first_get(cache, users):
    user = _make_user()
    users.add_user(user)

    stream = cache.get("U1")

    assert stream.value == user


def test_missing_profile_is_delivered_as_none(cache):
    stream = cache.get("ghost")

    assert stream.has_value
    assert stream.value is None


def test_updates_flow_to_observers(cache, users):
    users.add_user(_make_user())
    received = []
    cache.get("U1").subscribe(received.append)

    users.update_user("U1", _make_user(username="johnny"))

    assert [u.username for u in received] == ["jdoe", "johnny"]


def test_deleted_profile_is_published_as_none(cache, users):
    users.add_user(_make_user())
    stream = cache.get("U1")

    users.delete_user("U1")

    assert stream.value is None
    assert not stream.closed


def test_late_snapshot_from_concurrent_writer_is_ignored(cache, store, users):
    """A writer whose delivery is held back must not roll the profile back."""
    users.add_user(_make_user())
    entered = threading.Event()
    release = threading.Event()

    def slow_listener(snapshot):
        if snapshot.exists and snapshot.data["username"] == "v1":
            entered.set()
            release.wait(timeout=5)

    # Registered before the cache, so it runs first on every write.
    store.add_change_listener("users/U1", slow_listener, lambda e: None)
    stream = cache.get("U1")

    writer = threading.Thread(
        target=users.update_user, args=("U1", _make_user(username="v1"))
    )
    writer.start()
    assert entered.wait(timeout=5)

    users.update_user("U1", _make_user(username="v2"))
    release.set()
    writer.join(timeout=5)

    assert users.get_user("U1").username == "v2"
    assert stream.value.username == "v2"


def test_one_store_listener_per_uid(cache, store, users):
    users.add_user(_make_user())

    for _ in range(5):
        cache.get("U1")

    assert store.listener_count("users/U1") == 1


# ---------------------------------------------------------------------------
# Malformed documents
# ---------------------------------------------------------------------------


def test_malformed_profile_keeps_previous_value(cache, store, users):
    user = _make_user()
    users.add_user(user)
    stream = cache.get("U1")

    broken = user_profile_to_document(user)
    broken["date_of_birth"] = "not-a-date"
    store.set("users/U1", broken)

    assert stream.value == user
    assert not stream.closed

    users.update_user("U1", _make_user(country="France"))
    assert stream.value.country == "France"


# ---------------------------------------------------------------------------
# Failures and shutdown
# ---------------------------------------------------------------------------


def test_listener_failure_evicts_and_reopens(cache, store, users):
    users.add_user(_make_user())
    errors = []
    stream = cache.get("U1")
    stream.subscribe(lambda u: None, on_error=errors.append)

    store.fail_listeners("users/U1", PermissionError("permission denied"))

    assert isinstance(errors[0], TerminalFeedError)
    assert stream.closed
    assert "U1" not in cache

    fresh = cache.get("U1")
    assert fresh is not stream
    assert fresh.value.username == "jdoe"
    assert store.listener_count("users/U1") == 1


def test_close_detaches_every_listener(store, users):
    users.add_user(_make_user("U1"))
    users.add_user(_make_user("U2", username="other"))
    cache = create_user_live_cache(store)
    cache.get("U1")
    cache.get("U2")

    cache.close()

    assert store.listener_count("users/U1") == 0
    assert store.listener_count("users/U2") == 0


# ---------------------------------------------------------------------------
# System account
# ---------------------------------------------------------------------------


def test_system_uid_yields_fixed_profile_without_store(cache, store):
    stream = cache.get(SYSTEM_OPENAI_UID)

    assert stream.value.uid == SYSTEM_OPENAI_UID
    assert stream.value.username == "OpenAI"
    assert stream.value.date_of_birth == date(2015, 12, 11)
    assert store.listener_count(f"users/{SYSTEM_OPENAI_UID}") == 0


def test_invalid_uid_fails_stream(cache):
    stream = cache.get("bad/uid")

    assert stream.closed
    assert isinstance(stream.error, TerminalFeedError)

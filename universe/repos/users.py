"""User profile repository backed by a document store."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from universe.domain.errors import DecodeError, UserNotFoundError
from universe.domain.models import UserProfile
from universe.repos.interfaces import UserRepository
from universe.store.interfaces import Document, DocumentStore, Fields, document_path

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def user_profile_to_document(user: UserProfile) -> Fields:
    return user.model_dump(mode="json")


def document_to_user_profile(doc: Document) -> UserProfile | None:
    """Convert a user document, returning None when the document does not exist.

    Raises:
        DecodeError: If a field is missing or malformed, e.g. an unparsable
            ``date_of_birth``.
    """
    if doc.data is None:
        return None
    data = dict(doc.data)
    data["uid"] = data.get("uid") or doc.id
    try:
        return UserProfile.model_validate(data)
    except ValidationError as exc:
        logger.error("Error converting document %s to UserProfile: %s", doc.path, exc)
        raise DecodeError(doc.path, str(exc)) from exc


class DocumentUserRepository(UserRepository):
    def __init__(self, store: DocumentStore, collection: str = USERS_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    def _path(self, uid: str) -> str:
        try:
            return document_path(self._collection, uid)
        except ValueError:
            raise UserNotFoundError(uid) from None

    def _require(self, uid: str) -> str:
        # Existence only; a malformed profile can still be overwritten or deleted.
        path = self._path(uid)
        if not self._store.get(path).exists:
            raise UserNotFoundError(uid)
        return path

    def get_all_users(self) -> list[UserProfile]:
        return [
            user
            for user in map(document_to_user_profile, self._store.query(self._collection))
            if user is not None
        ]

    def get_user(self, uid: str) -> UserProfile:
        user = document_to_user_profile(self._store.get(self._path(uid)))
        if user is None:
            raise UserNotFoundError(uid)
        return user

    def add_user(self, user: UserProfile) -> None:
        if not user.uid.strip():
            raise ValueError("User uid must not be blank")
        self._store.set(self._path(user.uid), user_profile_to_document(user))

    def update_user(self, uid: str, new_user: UserProfile) -> None:
        path = self._require(uid)
        stored = new_user.model_copy(update={"uid": uid})
        self._store.set(path, user_profile_to_document(stored))

    def delete_user(self, uid: str) -> None:
        self._store.delete(self._require(uid))

    def is_username_unique(self, username: str) -> bool:
        matches = self._store.query(
            self._collection, lambda data: data.get("username") == username
        )
        return not matches

    # ------------------------------------------------------------------
    # Follow graph
    # ------------------------------------------------------------------

    def follow_user(self, current_uid: str, target_uid: str) -> None:
        self._set_following(current_uid, target_uid, follow=True)

    def unfollow_user(self, current_uid: str, target_uid: str) -> None:
        self._set_following(current_uid, target_uid, follow=False)

    def _set_following(self, current_uid: str, target_uid: str, follow: bool) -> None:
        """Keep ``following`` on the follower and ``followers`` on the target in step.

        Both profiles are read in full, so a malformed one raises
        ``DecodeError`` until it is repaired with ``update_user``.
        """
        if current_uid == target_uid:
            raise ValueError("Users cannot follow themselves")
        current = self.get_user(current_uid)
        target = self.get_user(target_uid)

        if follow:
            following = current.following | {target_uid}
            followers = target.followers | {current_uid}
        else:
            following = current.following - {target_uid}
            followers = target.followers - {current_uid}

        self._store.set(
            self._path(current_uid),
            user_profile_to_document(current.model_copy(update={"following": following})),
        )
        self._store.set(
            self._path(target_uid),
            user_profile_to_document(target.model_copy(update={"followers": followers})),
        )
        logger.info(
            "%s %s %s", current_uid, "followed" if follow else "unfollowed", target_uid
        )

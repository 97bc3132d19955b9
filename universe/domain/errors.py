"""Domain error codes and exceptions."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    DECODE_FAILED = "DECODE_FAILED"
    FEED_TERMINATED = "FEED_TERMINATED"
    CHAT_NOT_FOUND = "CHAT_NOT_FOUND"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when a keyed record does not exist."""

    def __init__(self, code: ErrorCode, kind: str, entity_id: str) -> None:
        super().__init__(code=code, message=f"No {kind} found with id: {entity_id}")
        self.entity_id = entity_id


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: str) -> None:
        super().__init__(ErrorCode.EVENT_NOT_FOUND, "event", event_id)
        self.event_id = event_id


class UserNotFoundError(NotFoundError):
    def __init__(self, uid: str) -> None:
        super().__init__(ErrorCode.USER_NOT_FOUND, "user", uid)
        self.uid = uid


class ChatNotFoundError(NotFoundError):
    def __init__(self, chat_id: str) -> None:
        super().__init__(ErrorCode.CHAT_NOT_FOUND, "chat", chat_id)
        self.chat_id = chat_id


class DecodeError(DomainError):
    """Raised when a stored document cannot be converted to a domain model."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.DECODE_FAILED,
            message=f"Malformed document at {path}: {reason}",
        )
        self.path = path
        self.reason = reason


class TerminalFeedError(DomainError):
    """Raised to observers when a live subscription fails for good."""

    def __init__(self, key: object, cause: BaseException | None = None) -> None:
        super().__init__(
            code=ErrorCode.FEED_TERMINATED,
            message=f"Live feed for {key!r} terminated",
        )
        self.key = key
        self.cause = cause

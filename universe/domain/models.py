"""Domain models for events and user profiles."""

from __future__ import annotations

import base64
from datetime import date, datetime, timezone

from pydantic import BaseModel, Field, field_serializer, field_validator

from universe.domain.tags import Tag

# Creator id of events produced by the AI event generator.
SYSTEM_OPENAI_UID = "system_openai"


def _decode_bytes(value: object) -> object:
    # JSON documents carry binary fields as base64 text.
    if isinstance(value, str):
        return base64.b64decode(value.encode("ascii"), validate=True)
    return value


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Location(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class Event(BaseModel):
    """An event as stored and returned by the event repository.

    ``id`` is blank until the event is persisted. The creator is not
    implicitly a participant.
    """

    id: str = ""
    title: str
    description: str | None = None
    date: datetime
    tags: set[Tag] = Field(default_factory=set)
    creator: str
    participants: set[str] = Field(default_factory=set)
    location: Location = Field(default_factory=lambda: Location(latitude=0.0, longitude=0.0))
    picture: bytes | None = None
    is_private: bool = False

    @field_validator("picture", mode="before")
    @classmethod
    def _picture_from_base64(cls, value: object) -> object:
        return _decode_bytes(value)

    @field_serializer("picture", when_used="json-unless-none")
    def _picture_to_base64(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


class UserProfile(BaseModel):
    uid: str
    username: str
    first_name: str = ""
    last_name: str = ""
    country: str = ""
    description: str | None = None
    date_of_birth: date
    tags: set[Tag] = Field(default_factory=set)
    profile_picture: bytes | None = None
    followers: set[str] = Field(default_factory=set)
    following: set[str] = Field(default_factory=set)

    @field_validator("profile_picture", mode="before")
    @classmethod
    def _picture_from_base64(cls, value: object) -> object:
        return _decode_bytes(value)

    @field_serializer("profile_picture", when_used="json-unless-none")
    def _picture_to_base64(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


class Message(BaseModel):
    """One chat message. ``message_id`` is assigned when the message is sent."""

    message_id: str = ""
    sender_id: str
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def display_time(self) -> str:
        return self.timestamp.strftime("%H:%M")


class Chat(BaseModel):
    chat_id: str
    admin: str
    last_message: Message | None = None


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class NewIdResponse(BaseModel):
    id: str


class GenerateEventsRequest(BaseModel):
    location: Location
    count: int | None = Field(default=None, gt=0, le=20)


class CreateChatRequest(BaseModel):
    chat_id: str
    admin: str


class SendMessageRequest(BaseModel):
    sender_id: str
    message: str

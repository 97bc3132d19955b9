"""FastAPI application: the HTTP surface of the event discovery service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from universe.config import Settings, get_settings
from universe.domain.errors import DecodeError, DomainError, NotFoundError, TerminalFeedError
from universe.domain.models import (
    Chat,
    CreateChatRequest,
    Event,
    GenerateEventsRequest,
    Message,
    NewIdResponse,
    SendMessageRequest,
    UserProfile,
)
from universe.live.cache import LiveEntityCache
from universe.live.chats import create_last_message_live_cache
from universe.live.profiles import create_user_live_cache
from universe.repos.chats import DocumentChatRepository
from universe.repos.events import DocumentEventRepository
from universe.repos.interfaces import ChatRepository, EventRepository, UserRepository
from universe.repos.users import DocumentUserRepository
from universe.services.ai_events import generate_events_for_user
from universe.store.interfaces import DocumentStore
from universe.store.memory import InMemoryDocumentStore

logger = logging.getLogger(__name__)

LIVE_VALUE_TIMEOUT_S = 2.0


def create_app(
    settings: Settings | None = None, store: DocumentStore | None = None
) -> FastAPI:
    """Build the app and its collaborators once; routes reach them via ``app.state``."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    store = store or InMemoryDocumentStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s", settings.app_name)
        yield
        app.state.user_live_cache.close()
        app.state.last_message_live_cache.close()
        logger.info("Shut down %s", settings.app_name)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.event_repo = DocumentEventRepository(store, settings.events_collection)
    app.state.user_repo = DocumentUserRepository(store, settings.users_collection)
    app.state.user_live_cache = create_user_live_cache(store, settings.users_collection)
    app.state.chat_repo = DocumentChatRepository(store, settings.chats_collection)
    app.state.last_message_live_cache = create_last_message_live_cache(
        store, settings.chats_collection
    )

    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(ValueError, _value_error_handler)
    app.add_exception_handler(TimeoutError, _timeout_handler)
    _register_routes(app)
    return app


# ── Error mapping ─────────────────────────────────────────────────────


def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, TerminalFeedError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(exc, DecodeError):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code.value},
    )


def _value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def _timeout_handler(request: Request, exc: TimeoutError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_504_GATEWAY_TIMEOUT, content={"detail": str(exc)})


# ── Dependencies ──────────────────────────────────────────────────────


def get_event_repo(request: Request) -> EventRepository:
    return request.app.state.event_repo


def get_user_repo(request: Request) -> UserRepository:
    return request.app.state.user_repo


def get_user_live_cache(request: Request) -> LiveEntityCache[str, UserProfile]:
    return request.app.state.user_live_cache


def get_chat_repo(request: Request) -> ChatRepository:
    return request.app.state.chat_repo


def get_last_message_live_cache(request: Request) -> LiveEntityCache[str, Message]:
    return request.app.state.last_message_live_cache


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# ── Routes ────────────────────────────────────────────────────────────


def _register_routes(app: FastAPI) -> None:
    @app.get("/events", response_model=list[Event])
    def list_events(
        viewer_id: str | None = None,
        following: list[str] | None = Query(default=None),
        repo: EventRepository = Depends(get_event_repo),
    ) -> list[Event]:
        """Return all events, or those visible to ``viewer_id`` when given."""
        return repo.get_all_events(viewer_id, following or ())

    @app.get("/events/new-id", response_model=NewIdResponse)
    def new_event_id(repo: EventRepository = Depends(get_event_repo)) -> NewIdResponse:
        return NewIdResponse(id=repo.get_new_id())

    @app.post("/events", response_model=Event, status_code=status.HTTP_201_CREATED)
    def create_event(event: Event, repo: EventRepository = Depends(get_event_repo)) -> Event:
        """Store an event; a blank id is replaced by a fresh one."""
        if not event.id.strip():
            event = event.model_copy(update={"id": repo.get_new_id()})
        repo.add_event(event)
        return event

    @app.get("/events/{event_id}", response_model=Event)
    def get_event(event_id: str, repo: EventRepository = Depends(get_event_repo)) -> Event:
        return repo.get_event(event_id)

    @app.put("/events/{event_id}", response_model=Event)
    def update_event(
        event_id: str, event: Event, repo: EventRepository = Depends(get_event_repo)
    ) -> Event:
        repo.update_event(event_id, event)
        return repo.get_event(event_id)

    @app.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_event(event_id: str, repo: EventRepository = Depends(get_event_repo)) -> None:
        repo.delete_event(event_id)

    @app.post("/users", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
    def create_user(
        user: UserProfile, users: UserRepository = Depends(get_user_repo)
    ) -> UserProfile:
        users.add_user(user)
        return user

    @app.get("/users/{uid}", response_model=UserProfile)
    def get_user(uid: str, users: UserRepository = Depends(get_user_repo)) -> UserProfile:
        return users.get_user(uid)

    @app.post("/users/{uid}/following/{target_uid}", status_code=status.HTTP_204_NO_CONTENT)
    def follow(
        uid: str, target_uid: str, users: UserRepository = Depends(get_user_repo)
    ) -> None:
        users.follow_user(uid, target_uid)

    @app.delete("/users/{uid}/following/{target_uid}", status_code=status.HTTP_204_NO_CONTENT)
    def unfollow(
        uid: str, target_uid: str, users: UserRepository = Depends(get_user_repo)
    ) -> None:
        users.unfollow_user(uid, target_uid)

    @app.get("/users/{uid}/events", response_model=list[Event])
    def user_involved_events(
        uid: str, repo: EventRepository = Depends(get_event_repo)
    ) -> list[Event]:
        """Events the user created or joins, private ones included."""
        return repo.get_user_involved_events(uid)

    @app.get("/users/{uid}/suggestions", response_model=list[Event])
    def user_suggestions(
        uid: str,
        repo: EventRepository = Depends(get_event_repo),
        users: UserRepository = Depends(get_user_repo),
    ) -> list[Event]:
        return repo.get_suggested_events_for_user(users.get_user(uid))

    @app.get("/users/{uid}/live", response_model=UserProfile | None)
    def live_user(
        uid: str,
        cache: LiveEntityCache[str, UserProfile] = Depends(get_user_live_cache),
    ) -> UserProfile | None:
        """Latest profile from the shared listener; 503 once the listener failed."""
        return cache.get(uid).wait(timeout=LIVE_VALUE_TIMEOUT_S)

    @app.post("/users/{uid}/ai-events", response_model=list[Event])
    def generate_ai_events(
        uid: str,
        body: GenerateEventsRequest,
        repo: EventRepository = Depends(get_event_repo),
        users: UserRepository = Depends(get_user_repo),
        settings: Settings = Depends(get_app_settings),
    ) -> list[Event]:
        """Generate events for the user with the LLM and store them."""
        return generate_events_for_user(
            users.get_user(uid),
            repo,
            body.location,
            now=datetime.now(),
            settings=settings,
            count=body.count,
        )

    @app.post("/chats", response_model=Chat, status_code=status.HTTP_201_CREATED)
    def create_chat(
        body: CreateChatRequest, chats: ChatRepository = Depends(get_chat_repo)
    ) -> Chat:
        return chats.create_chat(body.chat_id, body.admin)

    @app.get("/chats/{chat_id}", response_model=Chat)
    def load_chat(chat_id: str, chats: ChatRepository = Depends(get_chat_repo)) -> Chat:
        return chats.load_chat(chat_id)

    @app.get("/chats/{chat_id}/messages", response_model=list[Message])
    def list_messages(
        chat_id: str, chats: ChatRepository = Depends(get_chat_repo)
    ) -> list[Message]:
        return chats.get_messages(chat_id)

    @app.post(
        "/chats/{chat_id}/messages",
        response_model=Message,
        status_code=status.HTTP_201_CREATED,
    )
    def send_message(
        chat_id: str,
        body: SendMessageRequest,
        chats: ChatRepository = Depends(get_chat_repo),
    ) -> Message:
        message = Message(sender_id=body.sender_id, message=body.message)
        return chats.send_message(chat_id, message)

    @app.get("/chats/{chat_id}/last-message", response_model=Message | None)
    def last_message(
        chat_id: str,
        cache: LiveEntityCache[str, Message] = Depends(get_last_message_live_cache),
    ) -> Message | None:
        """Chat list preview, served from the shared chat listener."""
        return cache.get(chat_id).wait(timeout=LIVE_VALUE_TIMEOUT_S)

"""
Conversation state for the chat front end.

Drives one conversation against the ``/chat`` endpoint: embeds each outgoing
message locally, streams the assistant reply, and keeps a list of suggested
follow-up questions in step with the latest user message.

Two independent state machines are tracked:

- conversation: ``idle -> awaiting-embedding -> awaiting-response -> idle``
- suggestions: ``idle -> awaiting-suggestions -> has-suggestions | idle``

Only one suggestion fetch is live at a time. Starting a new one cancels the
old one, and a response that arrives for a superseded turn is discarded.
"""
from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

import httpx
import structlog

from sales_assistant.core.config import Settings, get_settings
from sales_assistant.core.exceptions import RAGBaseError

logger = structlog.get_logger(__name__)

Embedder = Callable[[str], Sequence[float]]
TokenProvider = Callable[[], Awaitable[str | None]]

ANSWER_FAILED = "No fue posible obtener una respuesta, inténtalo de nuevo."


class ConversationState(str, Enum):
    IDLE = "idle"
    AWAITING_EMBEDDING = "awaiting-embedding"
    AWAITING_RESPONSE = "awaiting-response"


class SuggestionState(str, Enum):
    IDLE = "idle"
    AWAITING_SUGGESTIONS = "awaiting-suggestions"
    HAS_SUGGESTIONS = "has-suggestions"


@dataclass(frozen=True)
class Message:
    role: str
    content: str
    id: str = field(default_factory=lambda: uuid4().hex)

    def to_payload(self) -> dict[str, str]:
        return {"id": self.id, "role": self.role, "content": self.content}


def _default_embedder(text: str) -> Sequence[float]:
    from sales_assistant.llm.embeddings import embed_text
    return embed_text(text)


class ConversationController:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        session_token: TokenProvider,
        embedder: Embedder | None = None,
        endpoint: str = "/chat",
        on_token: Callable[[str], None] | None = None,
    ) -> None:
        self._http = http_client
        self._session_token = session_token
        self._embedder = embedder or _default_embedder
        self._endpoint = endpoint
        self._on_token = on_token

        self.messages: list[Message] = []
        self.input = ""
        self.state = ConversationState.IDLE
        self.error: str | None = None

        self.suggestions: list[str] = []
        self.suggestion_state = SuggestionState.IDLE
        self._suggestion_turn = 0
        self._suggestion_task: asyncio.Task | None = None

    @classmethod
    def from_settings(
        cls,
        session_token: TokenProvider,
        settings: Settings | None = None,
        **kwargs,
    ) -> ConversationController:
        """Controller talking to the backend configured by ``assistant_api_url``."""
        settings = settings or get_settings()
        http_client = httpx.AsyncClient(
            base_url=settings.assistant_api_url,
            timeout=httpx.Timeout(settings.llm_timeout_seconds),
        )
        return cls(http_client=http_client, session_token=session_token, **kwargs)

    @property
    def ready(self) -> bool:
        """Input is enabled only while no submission is in flight."""
        return self.state is ConversationState.IDLE

    def set_input(self, text: str) -> None:
        self.input = text

    def select_suggestion(self, suggestion: str) -> None:
        # Fills the input; the user still decides when to send.
        self.input = suggestion

    async def submit(self, text: str | None = None) -> Message | None:
        """Send a user message and return the assistant reply, if any."""
        text = (self.input if text is None else text).strip()
        if not text or not self.ready:
            return None

        self._clear_suggestions()
        self.error = None
        self.state = ConversationState.AWAITING_EMBEDDING
        try:
            embedding = await self._embed(text)
            token = await self._session_token()
            if not token:
                logger.warning("submit_without_session")
                return None

            user_message = Message(role="user", content=text)
            self.messages.append(user_message)
            self.input = ""
            self._on_messages_changed(embedding)

            self.state = ConversationState.AWAITING_RESPONSE
            reply = await self._stream_answer(embedding, token)
        except (httpx.HTTPError, RAGBaseError) as exc:
            logger.error("answer_failed", error=str(exc))
            self.error = ANSWER_FAILED
            return None
        finally:
            self.state = ConversationState.IDLE

        assistant_message = Message(role="assistant", content=reply)
        self.messages.append(assistant_message)
        self._on_messages_changed()
        return assistant_message

    async def wait_for_suggestions(self) -> None:
        task = self._suggestion_task
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def aclose(self) -> None:
        self._cancel_suggestion_task()
        await self.wait_for_suggestions()

    async def _embed(self, text: str) -> list[float]:
        vector = await asyncio.to_thread(self._embedder, text)
        return [float(v) for v in vector]

    def _headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def _stream_answer(self, embedding: list[float], token: str) -> str:
        payload = {
            "messages": [m.to_payload() for m in self.messages],
            "embedding": json.dumps(embedding),
        }
        parts: list[str] = []
        async with self._http.stream(
            "POST", self._endpoint, json=payload, headers=self._headers(token)
        ) as response:
            response.raise_for_status()
            async for piece in response.aiter_text():
                parts.append(piece)
                if self._on_token is not None:
                    self._on_token(piece)
        return "".join(parts)

    def _on_messages_changed(self, embedding: list[float] | None = None) -> None:
        # An assistant reply never triggers a refresh; suggestions follow the user turn.
        if self.messages and self.messages[-1].role == "user":
            self._schedule_suggestions(self.messages[-1], embedding)

    def _cancel_suggestion_task(self) -> None:
        if self._suggestion_task is not None and not self._suggestion_task.done():
            self._suggestion_task.cancel()

    def _clear_suggestions(self) -> None:
        self._suggestion_turn += 1
        self._cancel_suggestion_task()
        self.suggestions = []
        self.suggestion_state = SuggestionState.IDLE

    def _schedule_suggestions(
        self, last_message: Message, embedding: list[float] | None
    ) -> None:
        self._cancel_suggestion_task()
        self._suggestion_turn += 1
        self.suggestion_state = SuggestionState.AWAITING_SUGGESTIONS
        self._suggestion_task = asyncio.create_task(
            self._fetch_suggestions(self._suggestion_turn, last_message, embedding)
        )

    async def _fetch_suggestions(
        self,
        turn: int,
        last_message: Message,
        embedding: list[float] | None,
    ) -> None:
        suggestions: list[str] = []
        try:
            suggestions = await self._request_suggestions(last_message, embedding)
        except Exception as exc:
            # Suggestions are optional; any failure just leaves the list empty.
            logger.warning(
                "suggestions_failed", error_type=type(exc).__name__, error=str(exc)
            )

        if turn != self._suggestion_turn:
            logger.debug("suggestions_discarded", turn=turn, current=self._suggestion_turn)
            return

        self.suggestions = suggestions
        self.suggestion_state = (
            SuggestionState.HAS_SUGGESTIONS if suggestions else SuggestionState.IDLE
        )

    async def _request_suggestions(
        self, last_message: Message, embedding: list[float] | None
    ) -> list[str]:
        if embedding is None:
            embedding = await self._embed(last_message.content)
        token = await self._session_token()
        if not token:
            return []

        response = await self._http.post(
            self._endpoint,
            json={
                "messages": [last_message.to_payload()],
                "embedding": json.dumps(embedding),
                "requestSuggestions": True,
            },
            headers=self._headers(token),
        )
        response.raise_for_status()
        data = response.json()
        suggestions = data.get("suggestions") if isinstance(data, dict) else None
        if not isinstance(suggestions, list):
            return []
        return [s for s in suggestions if isinstance(s, str)]

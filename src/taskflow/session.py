"""Assistant session - conversation log and request sequencing."""

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable

from .config import DEFAULT_AGENT_ID
from .core.chat import (
    NETWORK_ERROR_MESSAGE,
    SOFT_ERROR_MESSAGE,
    SUGGESTIONS,
    ChatTurn,
    Role,
    parse_envelope,
)
from .core.errors import SoftApiError, ValidationError
from .ports import AssistantService

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Session states."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class Outcome(Enum):
    """How the last request resolved."""

    SUCCESS = "success"
    SOFT_ERROR = "soft_error"
    TRANSPORT_ERROR = "transport_error"


class AssistantSession:
    """
    One conversation with the assistant.

    At most one request is in flight. A send while awaiting a response is
    ignored so every user turn is followed by exactly one assistant turn.
    Assistant failures never propagate: they become assistant turns.
    """

    def __init__(
        self,
        service: AssistantService,
        agent_id: str = DEFAULT_AGENT_ID,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.service = service
        self.agent_id = agent_id
        self._clock = clock
        self._turns: list[ChatTurn] = []
        self._last_id = 0
        self.state = SessionState.IDLE
        self.last_outcome: Outcome | None = None
        self._subscribers: list[Callable[["AssistantSession"], None]] = []

    @property
    def busy(self) -> bool:
        return self.state == SessionState.AWAITING_RESPONSE

    @property
    def turns(self) -> list[ChatTurn]:
        return list(self._turns)

    def suggestions(self) -> list[str]:
        """Canned prompts, offered only before the first turn."""
        if self._turns:
            return []
        return list(SUGGESTIONS)

    def subscribe(self, callback: Callable[["AssistantSession"], None]) -> Callable[[], None]:
        """Register a callback run after every appended turn."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _next_id(self) -> str:
        token = max(time.time_ns() // 1_000_000, self._last_id + 1)
        self._last_id = token
        return str(token)

    def _append(self, role: Role, content: str, **extra) -> ChatTurn:
        turn = ChatTurn(
            id=self._next_id(),
            role=role,
            content=content,
            timestamp=self._clock(),
            **extra,
        )
        self._turns.append(turn)
        for callback in list(self._subscribers):
            callback(self)
        return turn

    async def send(self, text: str) -> ChatTurn | None:
        """
        Send a user message and wait for the assistant turn.

        Returns the appended assistant turn, or None when the send was ignored
        because a request is already in flight.
        """
        if not text or not text.strip():
            raise ValidationError("Message cannot be empty")

        if self.busy:
            logger.debug("Ignoring send while a request is in flight")
            return None

        self.state = SessionState.AWAITING_RESPONSE
        try:
            self._append(Role.USER, text)
            content, extra = await self._resolve(text)
        finally:
            self.state = SessionState.IDLE

        return self._append(Role.ASSISTANT, content, **extra)

    async def _resolve(self, text: str) -> tuple[str, dict]:
        """Issue the request and reduce whatever comes back to assistant turn content."""
        try:
            envelope = await self.service.ask(text, self.agent_id)
        except Exception as e:
            # Transport faults, and anything else the service raises, end the turn the same way
            logger.warning(f"Assistant request failed: {e}")
            self.last_outcome = Outcome.TRANSPORT_ERROR
            return NETWORK_ERROR_MESSAGE, {}

        try:
            reply = parse_envelope(envelope)
        except SoftApiError as e:
            logger.info(f"Assistant reported an error: {e}")
            self.last_outcome = Outcome.SOFT_ERROR
            return e.message or SOFT_ERROR_MESSAGE, {}

        self.last_outcome = Outcome.SUCCESS
        return reply.answer, {
            "tips": reply.tips,
            "priority_suggestions": reply.priority_suggestions,
            "related_topics": reply.related_topics,
        }

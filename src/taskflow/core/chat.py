"""Assistant conversation model and reply normalization - no I/O."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .errors import SoftApiError

SUGGESTIONS = [
    "Prioritize my tasks",
    "What should I focus on?",
    "Help me manage my time",
    "Tips for productivity",
]

SOFT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


class Role(Enum):
    """Who wrote a turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ChatTurn:
    """One message in the conversation log."""

    id: str
    role: Role
    content: str
    timestamp: datetime
    tips: list[str] = field(default_factory=list)
    priority_suggestions: list[str] = field(default_factory=list)
    related_topics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "tips": list(self.tips),
            "prioritySuggestions": list(self.priority_suggestions),
            "relatedTopics": list(self.related_topics),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class AssistantReply:
    """Normalized success payload from the assistant."""

    answer: str
    tips: list[str] = field(default_factory=list)
    priority_suggestions: list[str] = field(default_factory=list)
    related_topics: list[str] = field(default_factory=list)


def _string_list(value) -> list[str]:
    """Coerce a payload field into a list of strings, dropping junk."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def parse_envelope(envelope) -> AssistantReply:
    """
    Normalize an assistant response envelope.

    Expected shape:
        {"success": true, "response": {"status": "success", "result": {...}}}

    Raises SoftApiError when the envelope signals failure or carries no
    usable answer. Never raises anything else for a malformed payload.
    """
    if not isinstance(envelope, dict):
        raise SoftApiError(None)

    response = envelope.get("response")
    if not isinstance(response, dict):
        response = {}

    message = response.get("message")
    if not isinstance(message, str) or not message.strip():
        message = None

    if not envelope.get("success") or response.get("status") != "success":
        raise SoftApiError(message)

    result = response.get("result")
    if not isinstance(result, dict):
        raise SoftApiError(message)

    answer = result.get("answer")
    if not isinstance(answer, str) or not answer.strip():
        raise SoftApiError(message)

    return AssistantReply(
        answer=answer,
        tips=_string_list(result.get("tips")),
        priority_suggestions=_string_list(result.get("priority_suggestions")),
        related_topics=_string_list(result.get("related_topics")),
    )

"""Ports - interfaces/protocols for external dependencies."""

from .kv_store import KeyValueStore
from .assistant_service import AssistantService

__all__ = [
    "KeyValueStore",
    "AssistantService",
]

"""Adapters - I/O implementations of ports."""

from .file_store import FileKeyValueStore
from .memory_store import MemoryKeyValueStore
from .agent_api import AgentAPIService

__all__ = [
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "AgentAPIService",
]

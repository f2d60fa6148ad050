"""Assistant service interface."""

from typing import Protocol


class AssistantService(Protocol):
    """Interface for the remote productivity assistant."""

    async def ask(self, text: str, agent_id: str) -> dict:
        """
        Send a message and return the raw response envelope.

        Raises TransportError when the service cannot be reached.
        """
        ...

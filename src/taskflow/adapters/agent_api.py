"""Assistant agent API adapter - HTTP client for productivity guidance."""

import asyncio
import logging

import requests

from taskflow.config import Config, load_config
from taskflow.core.errors import TransportError

logger = logging.getLogger(__name__)


class AgentAPIService:
    """
    Assistant agent HTTP adapter.

    Implements AssistantService protocol. Posts the message and returns the
    raw response envelope; interpreting it is the session's job. The blocking
    request runs in a worker thread so the event loop stays free.
    """

    def __init__(
        self,
        config: Config | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.assistant_api_key:
            headers["Authorization"] = f"Bearer {self.config.assistant_api_key}"
        return headers

    def ask_sync(self, text: str, agent_id: str) -> dict:
        """Blocking request. Returns the decoded response envelope."""
        if not self.config.assistant_url:
            raise TransportError("No assistant URL configured. Set ASSISTANT_URL in taskflow.conf")

        try:
            resp = self._session.post(
                self.config.assistant_url,
                json={"text": text, "agentId": agent_id},
                headers=self._headers(),
                timeout=self.config.assistant_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Assistant request failed: {e}")
            raise TransportError(f"Assistant request failed: {e}") from e

        try:
            envelope = resp.json()
        except ValueError as e:
            logger.error(f"Assistant returned non-JSON response (HTTP {resp.status_code})")
            raise TransportError(f"Assistant returned HTTP {resp.status_code}") from e

        if not resp.ok:
            # An error envelope from the agent still carries a displayable message
            logger.warning(f"Assistant returned HTTP {resp.status_code}")
        return envelope

    async def ask(self, text: str, agent_id: str) -> dict:
        """Send a message and return the raw response envelope."""
        return await asyncio.to_thread(self.ask_sync, text, agent_id)

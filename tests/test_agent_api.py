"""Tests for the assistant HTTP adapter."""

import asyncio
from unittest.mock import MagicMock

import pytest
import requests

from taskflow.adapters.agent_api import AgentAPIService
from taskflow.config import Config
from taskflow.core.errors import TransportError


@pytest.fixture
def config():
    return Config(assistant_url="https://agent.example.test/chat", assistant_timeout=5)


def mock_response(status_code=200, json_data=None, json_error=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    if json_error:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = json_data
    return resp


class TestAgentAPIService:
    def test_posts_text_and_agent_id(self, config):
        session = MagicMock()
        session.post.return_value = mock_response(json_data={"success": True})
        service = AgentAPIService(config, session=session)

        envelope = service.ask_sync("Prioritize my tasks", "agent-1")

        assert envelope == {"success": True}
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://agent.example.test/chat"
        assert kwargs["json"] == {"text": "Prioritize my tasks", "agentId": "agent-1"}
        assert kwargs["timeout"] == 5
        assert "Authorization" not in kwargs["headers"]

    def test_sends_bearer_key(self, config):
        config.assistant_api_key = "secret"
        session = MagicMock()
        session.post.return_value = mock_response(json_data={})
        AgentAPIService(config, session=session).ask_sync("hi", "agent-1")
        assert session.post.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"

    def test_connection_error_becomes_transport_error(self, config):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TransportError, match="refused"):
            AgentAPIService(config, session=session).ask_sync("hi", "agent-1")

    def test_timeout_becomes_transport_error(self, config):
        session = MagicMock()
        session.post.side_effect = requests.Timeout("slow")
        with pytest.raises(TransportError):
            AgentAPIService(config, session=session).ask_sync("hi", "agent-1")

    def test_non_json_body_is_transport_error(self, config):
        session = MagicMock()
        session.post.return_value = mock_response(502, json_error=ValueError("no json"))
        with pytest.raises(TransportError, match="502"):
            AgentAPIService(config, session=session).ask_sync("hi", "agent-1")

    def test_http_error_with_envelope_is_returned(self, config):
        body = {"success": False, "response": {"status": "error", "message": "quota exceeded"}}
        session = MagicMock()
        session.post.return_value = mock_response(429, json_data=body)
        assert AgentAPIService(config, session=session).ask_sync("hi", "agent-1") == body

    def test_missing_url(self):
        session = MagicMock()
        with pytest.raises(TransportError, match="ASSISTANT_URL"):
            AgentAPIService(Config(), session=session).ask_sync("hi", "agent-1")
        session.post.assert_not_called()

    def test_async_ask(self, config):
        session = MagicMock()
        session.post.return_value = mock_response(json_data={"success": True})
        service = AgentAPIService(config, session=session)
        assert asyncio.run(service.ask("hi", "agent-1")) == {"success": True}

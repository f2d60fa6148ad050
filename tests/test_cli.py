"""Tests for the click CLI."""

import json
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from taskflow.cli import main
from taskflow.config import Config
from taskflow.core.errors import TransportError


class FakeAssistant:
    def __init__(self, envelope=None, error=None):
        self.envelope = envelope
        self.error = error
        self.calls = []

    async def ask(self, text, agent_id):
        self.calls.append((text, agent_id))
        if self.error:
            raise self.error
        return self.envelope


@pytest.fixture
def config(tmp_path):
    return Config(data_dir=str(tmp_path / "data"), agent_id="agent-1")


@pytest.fixture
def run(config):
    runner = CliRunner()

    def invoke(*args, **kwargs):
        with patch("taskflow.cli.load_config", return_value=config):
            return runner.invoke(main, list(args), **kwargs)

    return invoke


class TestTaskCommands:
    def test_today_shows_seed_tasks(self, run):
        result = run("today")
        assert result.exit_code == 0
        assert "Review Q1 project proposals" in result.output
        assert "Completed (1)" in result.output

    def test_add_and_list_upcoming(self, run):
        result = run("add", "Buy", "milk", "-c", "shopping", "-p", "high", "-d", "tomorrow")
        assert result.exit_code == 0
        assert "Buy milk" in result.output

        result = run("upcoming", "--json")
        data = json.loads(result.output)
        assert [t["title"] for t in data["incomplete"]] == ["Buy milk"]
        assert data["incomplete"][0]["category"] == "Shopping"
        assert data["incomplete"][0]["dueLabel"] == "Tomorrow"

    def test_add_blank_title_fails(self, run):
        result = run("add", "   ")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_add_bad_due_date(self, run):
        result = run("add", "Thing", "-d", "next week")
        assert result.exit_code != 0

    def test_add_iso_due_date(self, run):
        due = (date.today() + timedelta(days=10)).isoformat()
        run("add", "Later", "-d", due)
        data = json.loads(run("upcoming", "--json").output)
        assert data["incomplete"][0]["dueDate"].startswith(due)

    def test_today_category_filter(self, run):
        data = json.loads(run("today", "--category", "work", "--json").output)
        assert data["category"] == "Work"
        assert [t["title"] for t in data["incomplete"]] == ["Review Q1 project proposals"]
        assert data["completed"] == []

    def test_done_toggles(self, run):
        result = run("done", "1")
        assert result.exit_code == 0
        assert "done" in result.output
        data = json.loads(run("today", "--json").output)
        assert "1" in [t["id"] for t in data["completed"]]

    def test_done_unknown_id(self, run):
        result = run("done", "999")
        assert result.exit_code == 1
        assert "No task with id 999" in result.output

    def test_rm(self, run):
        assert run("rm", "2").exit_code == 0
        data = json.loads(run("today", "--json").output)
        ids = [t["id"] for t in data["incomplete"] + data["completed"]]
        assert "2" not in ids

    def test_rm_unknown_id(self, run):
        assert run("rm", "999").exit_code == 1

    def test_upcoming_empty(self, run):
        assert "Nothing upcoming." in run("upcoming").output


class TestAggregateCommands:
    def test_lists(self, run):
        data = json.loads(run("lists", "--json").output)
        assert data == {"Work": 1, "Personal": 0, "Shopping": 1}

    def test_lists_text(self, run):
        assert "Work" in run("lists").output

    def test_stats_json(self, run):
        data = json.loads(run("stats", "--json").output)
        assert data["total"] == 3
        assert data["completed"] == 1
        assert data["completionRate"] == pytest.approx(100 / 3)
        assert data["categories"]["Personal"] == {"completed": 1, "total": 1, "rate": 100.0}

    def test_stats_text_rounds(self, run):
        assert "33%" in run("stats").output


class TestAssistantCommands:
    def test_ask(self, run):
        fake = FakeAssistant(
            {
                "success": True,
                "response": {
                    "status": "success",
                    "result": {
                        "answer": "Focus on high priority",
                        "tips": ["Do urgent first"],
                        "priority_suggestions": [],
                        "related_topics": ["time-management"],
                    },
                },
            }
        )
        with patch("taskflow.cli.AgentAPIService", return_value=fake):
            result = run("ask", "Prioritize", "my", "tasks")
        assert result.exit_code == 0
        assert fake.calls == [("Prioritize my tasks", "agent-1")]
        assert "Focus on high priority" in result.output
        assert "Do urgent first" in result.output
        assert "time-management" in result.output

    def test_ask_network_error_is_shown_not_raised(self, run):
        fake = FakeAssistant(error=TransportError("down"))
        with patch("taskflow.cli.AgentAPIService", return_value=fake):
            result = run("ask", "hello", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["content"].startswith("Network error")

    def test_chat_suggestion_shortcut(self, run):
        fake = FakeAssistant({"success": True, "response": {"status": "error"}})
        with patch("taskflow.cli.AgentAPIService", return_value=fake):
            result = run("chat", input="2\n\n")
        assert result.exit_code == 0
        assert "Prioritize my tasks" in result.output
        assert fake.calls == [("What should I focus on?", "agent-1")]
        assert "Sorry, I encountered an error" in result.output

"""TaskFlow CLI - personal task tracker."""

import asyncio
import json
import logging
import sys
from datetime import date, datetime, time, timedelta

import click

from .adapters.agent_api import AgentAPIService
from .adapters.file_store import FileKeyValueStore
from .config import Config, load_config
from .core.chat import ChatTurn
from .core.errors import NotFoundError, ValidationError
from .core.tasks import Category, Priority, Task
from .core.views import (
    FilterState,
    View,
    category_counts,
    compute_stats,
    format_due_date,
    format_rate,
    partition_completed,
    visible_tasks,
)
from .session import AssistantSession
from .store import TaskStore

PRIORITY_MARKERS = {Priority.LOW: "!", Priority.MEDIUM: "!!", Priority.HIGH: "!!!"}

CATEGORY_CHOICE = click.Choice([c.value for c in Category], case_sensitive=False)
PRIORITY_CHOICE = click.Choice([p.value for p in Priority], case_sensitive=False)


def _category(value: str | None) -> Category | None:
    if not value:
        return None
    return next(c for c in Category if c.value.lower() == value.lower())


def _parse_due(value: str | None) -> datetime:
    """Parse --due: today, tomorrow, +N (days from now) or YYYY-MM-DD."""
    today = date.today()
    if not value or value == "today":
        return datetime.now()
    if value == "tomorrow":
        return datetime.combine(today + timedelta(days=1), time.min)
    if value.startswith("+") and value[1:].isdigit():
        return datetime.combine(today + timedelta(days=int(value[1:])), time.min)
    try:
        return datetime.combine(date.fromisoformat(value), time.min)
    except ValueError:
        raise click.BadParameter(f"Expected today, tomorrow, +N or YYYY-MM-DD, got {value!r}")


def _open_store(config: Config) -> TaskStore:
    store = TaskStore(FileKeyValueStore(config.data_path))
    store.load()
    return store


def _task_json(task: Task) -> dict:
    data = task.to_dict()
    data["dueLabel"] = format_due_date(task.due_date)
    return data


def _task_line(task: Task) -> str:
    check = "x" if task.completed else " "
    marker = PRIORITY_MARKERS[task.priority]
    return f"[{check}] {task.id}  {marker:3} {task.title}  ({task.category.value}, {format_due_date(task.due_date)})"


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option()
@click.pass_context
def main(ctx, debug: bool):
    """TaskFlow - personal task tracker."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING),
    )
    ctx.obj = config


# ============== Tasks ==============


@main.command()
@click.argument("title", nargs=-1, required=True)
@click.option("--priority", "-p", type=PRIORITY_CHOICE, default="medium", show_default=True)
@click.option("--category", "-c", type=CATEGORY_CHOICE, default="Personal", show_default=True)
@click.option("--due", "-d", default=None, help="today, tomorrow, +N or YYYY-MM-DD")
@click.pass_obj
def add(config: Config, title: tuple[str, ...], priority: str, category: str, due: str | None):
    """Add a task."""
    store = _open_store(config)
    try:
        task = store.add(
            " ".join(title),
            priority=Priority(priority.lower()),
            category=_category(category),
            due_date=_parse_due(due),
        )
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Added {task.id}: {task.title}")


@main.command()
@click.argument("task_id")
@click.pass_obj
def done(config: Config, task_id: str):
    """Toggle a task's completed state."""
    store = _open_store(config)
    try:
        task = store.toggle(task_id)
    except NotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    state = "done" if task.completed else "open"
    click.echo(f"{task.title}: {state}")


@main.command()
@click.argument("task_id")
@click.pass_obj
def rm(config: Config, task_id: str):
    """Delete a task."""
    store = _open_store(config)
    try:
        task = store.remove(task_id)
    except NotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Deleted: {task.title}")


# ============== Views ==============


def _show_view(config: Config, view: View, category: str | None, as_json: bool, empty_msg: str) -> None:
    """Shared Today/Upcoming display logic."""
    store = _open_store(config)
    state = FilterState(active_view=view)
    state.select_category(_category(category))

    incomplete, completed = partition_completed(visible_tasks(store.all(), state))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "view": view.value,
                    "category": state.active_category.value if state.active_category else None,
                    "incomplete": [_task_json(t) for t in incomplete],
                    "completed": [_task_json(t) for t in completed],
                },
                indent=2,
            )
        )
        return

    if not incomplete and not completed:
        click.echo(empty_msg)
        return

    for task in incomplete:
        click.echo(_task_line(task))
    if completed:
        click.echo(f"\nCompleted ({len(completed)})")
        for task in completed:
            click.echo(_task_line(task))


@main.command()
@click.option("--category", "-c", type=CATEGORY_CHOICE, default=None)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def today(config: Config, category: str | None, as_json: bool):
    """Tasks due today."""
    _show_view(config, View.TODAY, category, as_json, "Nothing due today.")


@main.command()
@click.option("--category", "-c", type=CATEGORY_CHOICE, default=None)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def upcoming(config: Config, category: str | None, as_json: bool):
    """Tasks due after today."""
    _show_view(config, View.UPCOMING, category, as_json, "Nothing upcoming.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def lists(config: Config, as_json: bool):
    """Open task counts per category."""
    store = _open_store(config)
    counts = category_counts(store.all())

    if as_json:
        click.echo(json.dumps({c.value: n for c, n in counts.items()}, indent=2))
        return

    for category, count in counts.items():
        click.echo(f"{category.value:10} {count} open")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def stats(config: Config, as_json: bool):
    """Completion statistics."""
    store = _open_store(config)
    s = compute_stats(store.all())

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total": s.total,
                    "completed": s.completed,
                    "completionRate": s.completion_rate,
                    "weeklyTotal": s.weekly_total,
                    "weeklyCompleted": s.weekly_completed,
                    "weeklyRate": s.weekly_rate,
                    "categories": {
                        c.value: {"completed": cs.completed, "total": cs.total, "rate": cs.rate}
                        for c, cs in s.by_category.items()
                    },
                },
                indent=2,
            )
        )
        return

    click.echo(f"Completion rate  {format_rate(s.completion_rate):>5}  ({s.completed}/{s.total})")
    click.echo(f"This week        {format_rate(s.weekly_rate):>5}  ({s.weekly_completed}/{s.weekly_total})")
    click.echo()
    for category, cs in s.by_category.items():
        click.echo(f"{category.value:16} {format_rate(cs.rate):>5}  ({cs.completed}/{cs.total})")


# ============== Assistant ==============


def _show_turn(turn: ChatTurn) -> None:
    click.echo(turn.content)
    if turn.tips:
        click.echo("\nTips")
        for tip in turn.tips:
            click.echo(f"  • {tip}")
    if turn.priority_suggestions:
        click.echo("\nPriority Suggestions")
        for suggestion in turn.priority_suggestions:
            click.echo(f"  • {suggestion}")
    if turn.related_topics:
        click.echo("\nRelated: " + ", ".join(turn.related_topics))


def _new_session(config: Config) -> AssistantSession:
    return AssistantSession(AgentAPIService(config), agent_id=config.agent_id)


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def ask(config: Config, text: tuple[str, ...], as_json: bool):
    """Ask the assistant a single question."""
    session = _new_session(config)
    try:
        turn = asyncio.run(session.send(" ".join(text)))
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(turn.to_dict(), indent=2))
    else:
        _show_turn(turn)


@main.command()
@click.pass_obj
def chat(config: Config):
    """Interactive conversation with the assistant."""
    session = _new_session(config)

    click.echo("Ask me anything about your tasks. Empty line to quit.")
    click.echo("Try one of these:")
    for i, suggestion in enumerate(session.suggestions(), 1):
        click.echo(f"  {i}. {suggestion}")

    while True:
        text = click.prompt(">", default="", show_default=False).strip()
        if not text:
            break
        suggestions = session.suggestions()
        if text.isdigit() and 1 <= int(text) <= len(suggestions):
            text = suggestions[int(text) - 1]

        turn = asyncio.run(session.send(text))
        if turn is not None:
            click.echo()
            _show_turn(turn)
            click.echo()


if __name__ == "__main__":
    main()

"""Configuration management for TaskFlow."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TASKFLOW_HOME = Path(os.environ.get("TASKFLOW_HOME", Path.home() / "taskflow"))
CONFIG_FILE = TASKFLOW_HOME / "config" / "taskflow.conf"
DATA_DIR = TASKFLOW_HOME / "data"

DEFAULT_AGENT_ID = "697176e5d6d0dcaec1119067"


@dataclass
class Config:
    """TaskFlow configuration."""

    assistant_url: str = ""
    assistant_api_key: str = ""
    agent_id: str = DEFAULT_AGENT_ID
    assistant_timeout: float = 60.0
    data_dir: str = ""
    log_level: str = "WARNING"

    @property
    def data_path(self) -> Path:
        """Resolved data directory."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskflow.conf."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "assistant_url":
                config.assistant_url = value
            case "assistant_api_key":
                config.assistant_api_key = value
            case "agent_id":
                config.agent_id = value or DEFAULT_AGENT_ID
            case "assistant_timeout":
                try:
                    config.assistant_timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid ASSISTANT_TIMEOUT {value!r}, keeping {config.assistant_timeout}")
            case "data_dir":
                config.data_dir = value
            case "log_level":
                config.log_level = value.upper() or config.log_level
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config

"""Configuration management for pughtodo."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

TODO_HOME = Path(os.environ.get("TODO_HOME", Path.home() / ".pughtodo"))
CONFIG_FILE = TODO_HOME / "todo.conf"
DATA_DIR = TODO_HOME / "data"

SORT_MODES = ("score", "id")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """pughtodo configuration. Scoring constants are deliberately absent."""

    database: Path = field(default_factory=lambda: DATA_DIR / "todo.db")
    default_sort: str = "score"
    log_level: str = "WARNING"


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from todo.conf (KEY = value lines)."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            logger.warning(f"Ignoring malformed config line: {line!r}")
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "database":
                config.database = Path(value).expanduser()
            case "default_sort":
                if value.lower() in SORT_MODES:
                    config.default_sort = value.lower()
                else:
                    logger.warning(f"Unknown DEFAULT_SORT {value!r}, using {config.default_sort!r}")
            case "log_level":
                if value.upper() in LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Unknown LOG_LEVEL {value!r}, using {config.log_level!r}")
            case _:
                logger.debug(f"Ignoring unknown config key {key!r}")

    return config

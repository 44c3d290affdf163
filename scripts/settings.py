"""Settings loaded from environment variables.

One frozen Settings object for the whole app; CLI flags override it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

ENV_PREFIX = "TASKFORM"

DEFAULT_TASKS_FILE = Path("db") / "tasks.json"
DEFAULT_LOG_DIR = Path(".local") / "taskform"
DEFAULT_LOG_LEVEL = "INFO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    tasks_file: Path
    log_dir: Path
    log_level: str

    def with_overrides(self, **overrides) -> Settings:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def get_settings() -> Settings:
    return Settings(
        tasks_file=_env_path(_k("TASKS_FILE"), DEFAULT_TASKS_FILE),
        log_dir=_env_path(_k("LOG_DIR"), DEFAULT_LOG_DIR),
        log_level=_env(_k("LOG_LEVEL"), DEFAULT_LOG_LEVEL).upper(),
    )

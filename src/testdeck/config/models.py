#
# src/testdeck/config/models.py
#
"""
Attrs-based data models for testdeck configuration structure.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import define, field


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if not isinstance(value, str) or value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_positive_int(inst: Any, attr: Any, value: int) -> None:
    """Validator ensures integer is positive."""
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be positive integer, got {value}")


def _validate_positive_float(inst: Any, attr: Any, value: float) -> None:
    if not isinstance(value, int | float) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be a positive number, got {value}")


def _to_env_mapping(value: Any) -> dict[str, str]:
    """Coerce TOML env tables into a str -> str mapping."""
    if value is None:
        return {}
    return {str(k): str(v) for k, v in dict(value).items()}


# --- Section Models ---
@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for testdeck."""

    log_level: str = field(default="WARNING", validator=_validate_log_level)
    log_file: str | None = field(default=None)


@define(frozen=True, slots=True)
class SessionConfig:
    """Settings for the interactive session engine."""

    root: Path = field(default=Path("."), converter=Path)
    buffer_capacity: int = field(default=1000, validator=_validate_positive_int)
    # One scheduler tick; also the watch-mode coalescing window.
    poll_interval: float = field(default=0.1, validator=_validate_positive_float)
    drop_stale_output: bool = field(default=False)
    watch_on_start: bool = field(default=False)


@define(frozen=True, slots=True)
class RunnerConfig:
    """Which runner profile to use and extra environment for test processes."""

    profile: str = field(default="cargo")
    env: dict[str, str] = field(factory=dict, converter=_to_env_mapping)
    probe_fast_runner: bool = field(default=True)


@define(frozen=True, slots=True)
class TestdeckConfig:
    """Root configuration object for the testdeck application."""

    __test__ = False

    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    session: SessionConfig = field(factory=SessionConfig)
    runner: RunnerConfig = field(factory=RunnerConfig)


# 🔼⚙️

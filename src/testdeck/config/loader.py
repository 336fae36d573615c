#
# src/testdeck/config/loader.py
#
"""
Loads the optional TOML configuration file into attrs models.
"""

import tomllib
from pathlib import Path
from typing import Any

import attrs
import structlog

from testdeck.config.models import GlobalConfig, RunnerConfig, SessionConfig, TestdeckConfig
from testdeck.exceptions import ConfigurationError

log = structlog.get_logger("config.loader")

DEFAULT_CONFIG_NAME = "testdeck.toml"

_SECTIONS: dict[str, type] = {
    "global": GlobalConfig,
    "session": SessionConfig,
    "runner": RunnerConfig,
}


def _build_section(name: str, cls: type, raw: Any, config_path: Path) -> Any:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Section [{name}] must be a table", path=config_path)

    known = {a.name for a in attrs.fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in [{name}]: {', '.join(sorted(unknown))}", path=config_path
        )
    try:
        return cls(**raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value in [{name}]: {e}", path=config_path) from e


def load_config(config_path: Path | None, required: bool = False) -> TestdeckConfig:
    """
    Load and validate the configuration file.

    A missing file yields the defaults unless ``required`` is set (i.e. the
    path was given explicitly by the operator).
    """
    if config_path is None or not config_path.exists():
        if required:
            raise ConfigurationError("Configuration file not found", path=config_path)
        log.debug("No configuration file found, using defaults", path=str(config_path))
        return TestdeckConfig()

    log.debug("Loading configuration", path=str(config_path))
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Malformed TOML: {e}", path=config_path) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration: {e}", path=config_path) from e

    unknown_sections = set(data) - set(_SECTIONS)
    if unknown_sections:
        raise ConfigurationError(
            f"Unknown section(s): {', '.join(sorted(unknown_sections))}", path=config_path
        )

    sections = {
        name: _build_section(name, cls, data[name], config_path)
        for name, cls in _SECTIONS.items()
        if name in data
    }
    config = TestdeckConfig(
        global_config=sections.get("global", GlobalConfig()),
        session=sections.get("session", SessionConfig()),
        runner=sections.get("runner", RunnerConfig()),
    )
    log.info("Configuration loaded", path=str(config_path), profile=config.runner.profile)
    return config


# 🔼⚙️

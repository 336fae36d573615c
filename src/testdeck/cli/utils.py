# src/testdeck/cli/utils.py

import logging
from pathlib import Path

import click
import structlog

from testdeck.config import DEFAULT_CONFIG_NAME, TestdeckConfig, load_config
from testdeck.exceptions import ConfigurationError
from testdeck.telemetry.logger import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="TESTDECK_LOG_LEVEL",
        help="Set the logging level (overrides config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="TESTDECK_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="TESTDECK_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "INFO",
    default_log_file: str | None = None,
    tui_mode: bool = False,
    headless_mode: bool = False,
) -> None:
    """
    Setup logging using context values, allowing local overrides.
    """
    log_level_str = local_log_level or ctx.obj.get("LOG_LEVEL") or default_log_level
    log_file_path = local_log_file or ctx.obj.get("LOG_FILE") or default_log_file
    use_json_logs = local_json_logs if local_json_logs is not None else ctx.obj.get("JSON_LOGS", False)

    numeric_level = logging.getLevelName(log_level_str.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level_str = "INFO"

    core_setup_logging(
        level=numeric_level,
        json_logs=use_json_logs,
        log_file=log_file_path,
        tui_mode=tui_mode,
        headless_mode=headless_mode,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=log_level_str,
        file=log_file_path or "console",
        json=use_json_logs,
        tui=tui_mode,
        headless=headless_mode,
    )


def resolve_config_path(ctx: click.Context) -> tuple[Path, bool]:
    """The config file to read, and whether the operator named it explicitly."""
    explicit = ctx.obj.get("CONFIG_PATH")
    if explicit is not None:
        return Path(explicit), True
    return Path(DEFAULT_CONFIG_NAME), False


def load_context_config(ctx: click.Context) -> TestdeckConfig:
    """Load the configuration once per invocation; exits 1 on a bad file."""
    if ctx.obj.get("CONFIG") is not None:
        return ctx.obj["CONFIG"]

    config_path, required = resolve_config_path(ctx)
    try:
        config = load_config(config_path, required=required)
    except ConfigurationError as e:
        log.error("Failed to load configuration", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    ctx.obj["CONFIG"] = config
    return config


# ⚙️🛠️

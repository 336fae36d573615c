# src/testdeck/cli/config_cmds.py

import click
import structlog
from rich.pretty import pretty_repr

from testdeck.cli.utils import load_context_config, logging_options, resolve_config_path, setup_logging_from_context
from testdeck.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""


@config_cli.command(name="show")
@logging_options
@click.pass_context
def show_config(ctx: click.Context, **kwargs):
    """Load, validate, and display the effective configuration."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        default_log_level="WARNING",
        headless_mode=True,
    )
    config_path, explicit = resolve_config_path(ctx)
    log.info("Executing 'config show' command", config_path=str(config_path), explicit=explicit)

    config = load_context_config(ctx)
    click.echo(pretty_repr(config, expand_all=True))

    if not explicit and not config_path.exists():
        log.info("No configuration file present, showing defaults.")


# 🔼⚙️

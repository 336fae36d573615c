# src/testdeck/cli/main.py

"""
Main CLI entry point for testdeck using Click.
Handles global options like logging level and the config file location.
"""

from pathlib import Path

import click
import structlog

from testdeck import __version__
from testdeck.cli.config_cmds import config_cli
from testdeck.cli.list_cmds import list_cli
from testdeck.cli.tail_cmds import tail_cli
from testdeck.cli.ui_cmds import ui_cli
from testdeck.cli.utils import logging_options, setup_logging_from_context
from testdeck.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="testdeck")
@click.option(
    "-c",
    "--config-path",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    envvar="TESTDECK_CONF",
    show_envvar=True,
    help="Path to the testdeck configuration file (default: ./testdeck.toml if present).",
)
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    Testdeck: browse, run and watch tests from the terminal.

    Discovers tests under a source tree, runs one at a time and streams its
    colored output. Configuration precedence: CLI options > Environment
    Variables > Config File > Defaults.
    """
    ctx.ensure_object(dict)

    ctx.obj["CONFIG_PATH"] = config_path
    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False

    # Subcommands reconfigure once the config file is known; the UI must not
    # get a console handler even briefly.
    if ctx.invoked_subcommand != "ui":
        setup_logging_from_context(ctx, default_log_level="WARNING", headless_mode=True)
    log.debug(
        "Main CLI group initialized",
        config_path=str(config_path) if config_path else None,
        log_level=log_level,
        log_file=log_file,
        json_logs=json_logs,
    )


cli.add_command(config_cli)
cli.add_command(list_cli)
cli.add_command(tail_cli)
cli.add_command(ui_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️

# src/testdeck/cli/ui_cmds.py
#

from pathlib import Path

import click
import structlog

from testdeck.cli.utils import load_context_config, logging_options, setup_logging_from_context
from testdeck.exceptions import TestdeckError
from testdeck.runtime import SessionController
from testdeck.telemetry import StructLogger
from testdeck.tui import TestdeckTuiApp

log: StructLogger = structlog.get_logger("cli.ui")

DEFAULT_TUI_LOG_FILE = "debug.log"


@click.command(name="ui")
@click.argument(
    "root",
    required=False,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@logging_options
@click.pass_context
def ui_cli(ctx: click.Context, root: Path | None, **kwargs):
    """Interactive test browser for ROOT (default: the configured root)."""
    config = load_context_config(ctx)

    # The terminal belongs to the TUI; logs only ever go to a file.
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        default_log_level=config.global_config.log_level,
        default_log_file=config.global_config.log_file or DEFAULT_TUI_LOG_FILE,
        tui_mode=True,
    )
    log.info("Initializing interactive session...")

    try:
        controller = SessionController.from_config(config, root=root, watch=True)
    except TestdeckError as e:
        log.error("Failed to build session", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        app = TestdeckTuiApp(controller, poll_interval=config.session.poll_interval)
        app.run()
        log.info("Interactive session finished.")
    except Exception as e:
        log.critical("The TUI application crashed unexpectedly.", error=str(e), exc_info=True)
        click.echo(f"An unexpected error occurred in the TUI: {e}", err=True)
        ctx.exit(1)


# 🔼⚙️

# src/testdeck/cli/tail_cmds.py

import logging
import sys
import time
from pathlib import Path

import click
import structlog

from testdeck.cli.utils import load_context_config, logging_options, setup_logging_from_context
from testdeck.exceptions import TestdeckError
from testdeck.runtime import SessionController
from testdeck.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.tail")

EXIT_NOT_FOUND = 1
EXIT_INTERRUPTED = 130


def _echo_pending(controller: SessionController) -> None:
    for chunk in controller.pump_output():
        click.echo(chunk.text, nl=False)


def stream_session(controller: SessionController, watch: bool, poll_interval: float) -> int:
    """
    Prints the selected test's output until it finishes, or, with ``watch``,
    keeps rerunning it on content changes until interrupted.
    """
    handle = controller.run_selected()
    if handle is None:
        _echo_pending(controller)
        return EXIT_NOT_FOUND

    while True:
        # Read completion before draining so the status line is never missed.
        done = handle.is_done
        _echo_pending(controller)
        if watch:
            if controller.watch_coordinator is not None and controller.watch_coordinator.tick():
                handle = controller.current_run or handle
        elif done:
            return handle.exit_code if handle.exit_code is not None else 1
        time.sleep(poll_interval)


def _run_headless_session(controller: SessionController, watch: bool, poll_interval: float) -> int:
    try:
        return stream_session(controller, watch, poll_interval)
    except KeyboardInterrupt:
        log.warning("Shutdown initiated by KeyboardInterrupt (CTRL-C).")
        return EXIT_INTERRUPTED
    finally:
        controller.shutdown()
        logging.shutdown()


@click.command(name="tail")
@click.argument("test_name")
@click.argument(
    "root",
    required=False,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option("-w", "--watch", is_flag=True, default=False, help="Rerun the test whenever a watched file changes.")
@logging_options
@click.pass_context
def tail_cli(ctx: click.Context, test_name: str, root: Path | None, watch: bool, **kwargs):
    """Run TEST_NAME non-interactively and stream its output to stdout."""
    config = load_context_config(ctx)
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        default_log_level=config.global_config.log_level,
        default_log_file=config.global_config.log_file,
        headless_mode=True,
    )
    log.info("Initializing tail command...", test=test_name, watch=watch)

    try:
        controller = SessionController.from_config(config, root=root, watch=watch)
        controller.state.watch_enabled = watch
        controller.start()
    except TestdeckError as e:
        log.error("Failed to start session", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    # Rescan messages are chatter here; only the run goes to stdout.
    controller.pump_output()
    if not controller.select_test(test_name):
        controller.shutdown()
        click.echo(f"Error: test '{test_name}' not found under '{controller.root}'.", err=True)
        ctx.exit(EXIT_NOT_FOUND)

    exit_code = _run_headless_session(controller, watch, config.session.poll_interval)

    log.info("'tail' command finished.", exit_code=exit_code)
    if exit_code != 0:
        sys.exit(exit_code)


# 🔼⚙️

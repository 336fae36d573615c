# src/testdeck/cli/list_cmds.py

from pathlib import Path

import click
import structlog

from testdeck.cli.utils import load_context_config, logging_options, setup_logging_from_context
from testdeck.exceptions import TestdeckError
from testdeck.telemetry import StructLogger
from testdeck.testing import RegexTestDiscoverer, get_profile

log: StructLogger = structlog.get_logger("cli.list")


@click.command(name="list")
@click.argument(
    "root",
    required=False,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@logging_options
@click.pass_context
def list_cli(ctx: click.Context, root: Path | None, **kwargs):
    """Discover tests under ROOT and print them, grouped by file."""
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
    scan_root = root or config.session.root

    try:
        discoverer = RegexTestDiscoverer(get_profile(config.runner.profile))
        groups = discoverer.scan(scan_root)
    except TestdeckError as e:
        log.error("Test discovery failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if not groups:
        click.echo(f"No tests found under '{scan_root}'.", err=True)
        return

    for group in groups:
        try:
            shown = group.source_path.relative_to(scan_root)
        except ValueError:
            shown = group.source_path
        click.echo(str(shown))
        for name in group.test_names:
            click.echo(f"  {name}")
    log.info("Listed tests", files=len(groups), tests=sum(len(g.test_names) for g in groups))


# 🔼⚙️

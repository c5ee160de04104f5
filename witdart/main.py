"""
witdart — CLI entrypoint.

Usage:
    witdart --help
    witdart generate wit/host.wit lib/host.dart --no-copy-with
    witdart -c tools/witdart.yml build
    witdart config check --json

Subcommands live in ``witdart/ui/cli/``; this module only wires the
group, its global flags and logging.
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from witdart import __version__
from witdart.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    level_from_flags,
    setup_logging,
)
from witdart.ui.cli.config import config
from witdart.ui.cli.generate import build, generate


@click.group()
@click.version_option(__version__, prog_name="witdart")
@click.option("-v", "--verbose", is_flag=True, help="Log progress (INFO).")
@click.option("-q", "--quiet", is_flag=True, help="Only print errors.")
@click.option("--debug", is_flag=True, help="Log everything, including lark (DEBUG).")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="witdart.yml to use instead of searching upwards from the cwd.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
) -> None:
    """witdart — generate Dart bindings from WIT worlds."""
    ctx.ensure_object(dict)
    ctx.obj.update(quiet=quiet, config_path=config_path)

    setup_logging(
        level=level_from_flags(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
        quiet_third_party=not debug,
    )


cli.add_command(generate)
cli.add_command(build)
cli.add_command(config)


if __name__ == "__main__":
    cli()

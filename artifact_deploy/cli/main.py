# artifact_deploy/cli/main.py
"""Command line entry point for artifact-deploy"""

import logging
import os
import sys
from typing import Union

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from .commands import deploy, status

console = Console()


def _log_level(verbose: bool, debug: bool) -> Union[int, str]:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    # Unattended runs (cron, configuration management) set the level here
    return os.environ.get(ENV_LOG_LEVEL, "WARNING").upper()


def setup_logging(verbose: bool = False, debug: bool = False, quiet: bool = False) -> None:
    """Route deployment logs through rich

    Args:
        verbose: Log every deployment step (INFO level)
        debug: Also log hook commands and link updates (DEBUG level)
        quiet: Drop all log records; errors are still printed by the commands
    """
    if quiet:
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    handler = RichHandler(
        console=console,
        show_time=debug,
        show_path=debug,
        rich_tracebacks=debug,
        tracebacks_suppress=[click],
    )
    logging.basicConfig(
        level=_log_level(verbose, debug),
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )


class Context:
    """Options shared by all commands"""

    def __init__(self, verbose: bool = False, debug: bool = False, quiet: bool = False):
        self.verbose = verbose
        self.debug = debug
        self.quiet = quiet


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Log each deployment step')
@click.option('-d', '--debug', is_flag=True, help='Debug logging with tracebacks')
@click.option('-q', '--quiet', is_flag=True, help='Suppress log output')
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """Artifact Deploy - release-based deployment of packaged artifacts

    Installs a versioned artifact under <deploy_to>/releases/<version>,
    links shared directories into it, points <deploy_to>/current at it
    and prunes old releases.

    Targets are described in a YAML file, see `artifact-deploy deploy --help`.
    """
    setup_logging(verbose=verbose, debug=debug, quiet=quiet)
    ctx.obj = Context(verbose=verbose, debug=debug, quiet=quiet)


cli.add_command(deploy.deploy)
cli.add_command(deploy.pre_seed)
cli.add_command(status.status)


def main():
    """Console script entry point"""
    try:
        cli(prog_name=APP_NAME)
    except KeyboardInterrupt:
        console.print("\n[yellow]Deployment interrupted, re-run to complete it[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()

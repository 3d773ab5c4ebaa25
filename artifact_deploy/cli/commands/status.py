"""Status command implementation"""

import json
import sys

import click
from rich.console import Console

from ..utils.output import format_error, format_status
from ...api import Deployer
from ...exceptions import ArtifactDeployError
from ...services import ConfigService

console = Console()


@click.command()
@click.argument('config', type=click.Path(dir_okay=False))
@click.option('--target', 'target_name', help='Target name (all targets when omitted)')
@click.option('--output', type=click.Choice(['table', 'json']),
              default='table', help='Output format')
def status(config, target_name, output):
    """Show the current release and release history

    Example:
        artifact-deploy status deploy.yaml --target web
    """
    try:
        service = ConfigService(config)
        names = [target_name] if target_name else service.target_names()

        statuses = [Deployer(service.get_target(name)).status() for name in names]

        if output == 'json':
            click.echo(json.dumps([s.to_dict() for s in statuses], indent=2))
            return

        for deployment_status in statuses:
            format_status(deployment_status)

    except ArtifactDeployError as e:
        format_error(e)
        sys.exit(1)

"""Deploy and pre-seed command implementation"""

import sys

import click
from rich.console import Console

from ..utils.output import format_deploy_result, format_error
from ...api import Deployer
from ...exceptions import ArtifactDeployError
from ...services import ConfigService

console = Console()


def _load_target(config, target_name, version, force=None):
    overrides = {"version": version}
    if force:
        overrides["force"] = True
    return ConfigService(config).get_target(target_name, **overrides)


@click.command()
@click.argument('config', type=click.Path(dir_okay=False))
@click.option('--target', 'target_name', help='Target name (required when the config defines several)')
@click.option('--version', help='Version to deploy (overrides the configured one)')
@click.option('--force', is_flag=True, help='Reinstall even if the version is already current')
@click.pass_context
def deploy(ctx, config, target_name, version, force):
    """Deploy an artifact release

    Installs the configured version under <deploy_to>/releases/<version>,
    links shared directories, runs hooks, points <deploy_to>/current at
    the release and prunes old releases beyond `keep`.

    Running it again with the same version is a no-op apart from the
    configure hook.

    Examples:

        # Deploy the version named in the config
        artifact-deploy deploy deploy.yaml

        # Deploy a specific version of one target
        artifact-deploy deploy deploy.yaml --target web --version 1.2.0

        # Reinstall the current version
        artifact-deploy deploy deploy.yaml --force
    """
    try:
        target = _load_target(config, target_name, version, force)

        console.print(f"[cyan]Deploying {target.name} {target.version} to {target.deploy_to}...[/cyan]")
        result = Deployer(target).deploy()
        format_deploy_result(result)

    except ArtifactDeployError as e:
        format_error(e)
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if ctx.obj and ctx.obj.debug:
            console.print_exception()
        sys.exit(1)


@click.command(name='pre-seed')
@click.argument('config', type=click.Path(dir_okay=False))
@click.option('--target', 'target_name', help='Target name (required when the config defines several)')
@click.option('--version', help='Version to stage (overrides the configured one)')
@click.pass_context
def pre_seed(ctx, config, target_name, version):
    """Stage an artifact without installing it

    Creates the release skeleton and copies the artifact into the local
    cache so a later deploy does not need to fetch it. The current
    release is left untouched.

    Example:
        artifact-deploy pre-seed deploy.yaml --version 1.3.0
    """
    try:
        target = _load_target(config, target_name, version)

        result = Deployer(target).pre_seed()
        format_deploy_result(result)

    except ArtifactDeployError as e:
        format_error(e)
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if ctx.obj and ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

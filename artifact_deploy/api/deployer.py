"""Deployer API for deployment operations"""

from typing import Any, Dict, Mapping, Optional, Union

from ..core import ArtifactFetcher
from ..models import DeploymentStatus, DeploymentTarget, DeployResult
from ..services import DeploymentController, build_target

TargetSpec = Union[DeploymentTarget, Mapping[str, Any]]


class Deployer:
    """Deployer class for deployment operations"""

    def __init__(self,
                 target: TargetSpec,
                 fetcher: Optional[ArtifactFetcher] = None,
                 **options):
        """
        Initialize deployer

        Args:
            target: Deployment target, or a mapping of target fields
            fetcher: Fetcher used for remote artifact locations
            **options: Controller options (retries, retry_delay)
        """
        if not isinstance(target, DeploymentTarget):
            target = build_target(dict(target))

        self.target = target
        self.controller = DeploymentController(target, fetcher=fetcher, **options)

    def deploy(self) -> DeployResult:
        """
        Deploy the target's version

        Returns:
            DeployResult: Deployment result

        Raises:
            ArtifactDeployError: If any mandatory step fails
        """
        return self.controller.deploy()

    def pre_seed(self) -> DeployResult:
        """
        Stage the artifact in the cache without installing it

        Returns:
            DeployResult: Pre-seed result
        """
        return self.controller.pre_seed()

    def status(self) -> DeploymentStatus:
        """Current version, previous releases and cached versions"""
        return self.controller.status()


def deploy(target: TargetSpec,
           fetcher: Optional[ArtifactFetcher] = None,
           **options) -> DeployResult:
    """
    Deploy an artifact

    This is a convenience function that creates a Deployer instance
    and performs the deployment.

    Args:
        target: Deployment target, or a mapping of target fields
        fetcher: Fetcher used for remote artifact locations
        **options: Controller options

    Returns:
        DeployResult: Deployment result
    """
    return Deployer(target, fetcher=fetcher, **options).deploy()


def pre_seed(target: TargetSpec,
             fetcher: Optional[ArtifactFetcher] = None,
             **options) -> DeployResult:
    """
    Pre-seed an artifact into the cache

    Args:
        target: Deployment target, or a mapping of target fields
        fetcher: Fetcher used for remote artifact locations
        **options: Controller options

    Returns:
        DeployResult: Pre-seed result
    """
    return Deployer(target, fetcher=fetcher, **options).pre_seed()

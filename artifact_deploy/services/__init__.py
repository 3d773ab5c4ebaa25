"""Service layer for artifact-deploy"""

from .deploy_service import DeploymentController
from .config_service import ConfigService, build_target

__all__ = [
    "DeploymentController",
    "ConfigService",
    "build_target",
]

# artifact_deploy/models/__init__.py
"""Data models for artifact-deploy"""

from .target import DeploymentTarget, default_cache_root
from .release import Release, InstallDecision, Resolution, DeploymentStatus
from .result import Result, DeployResult, DeployState, OperationStatus

__all__ = [
    # Target model
    "DeploymentTarget",
    "default_cache_root",

    # Release models
    "Release",
    "InstallDecision",
    "Resolution",
    "DeploymentStatus",

    # Result models
    "Result",
    "DeployResult",
    "DeployState",
    "OperationStatus",
]

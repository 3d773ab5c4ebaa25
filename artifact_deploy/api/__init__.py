# artifact_deploy/api/__init__.py
"""API layer for artifact-deploy"""

from .deployer import Deployer, deploy, pre_seed
from ..exceptions import (
    ArtifactDeployError,
    ConfigError,
    SourceNotFoundError,
    UnsupportedFormatError,
    ExtractionError,
    FilesystemError,
    ReleaseInUseError,
    MetadataError,
    ChecksumMismatchError,
    HookError,
)

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",
    "pre_seed",

    # Exceptions
    "ArtifactDeployError",
    "ConfigError",
    "SourceNotFoundError",
    "UnsupportedFormatError",
    "ExtractionError",
    "FilesystemError",
    "ReleaseInUseError",
    "MetadataError",
    "ChecksumMismatchError",
    "HookError",
]

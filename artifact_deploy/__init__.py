"""Artifact Deploy - idempotent release deployment for packaged artifacts.

Installs a versioned artifact (tarball, zip or flat file) under a release
directory, wires shared resources in with symlinks, runs lifecycle hooks,
points `current` at the release and prunes old releases.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.deployer import Deployer, deploy, pre_seed

# Data models
from .models import (
    DeploymentTarget,
    Release,
    InstallDecision,
    Resolution,
    DeploymentStatus,
    DeployResult,
)

# Collaborator interfaces
from .core import ArtifactFetcher

# Exceptions
from .exceptions import (
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
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",
    "ArtifactFetcher",

    # Core API functions
    "deploy",
    "pre_seed",

    # Data models
    "DeploymentTarget",
    "Release",
    "InstallDecision",
    "Resolution",
    "DeploymentStatus",
    "DeployResult",

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

"""On-disk layout of cached artifacts and unpacked releases"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml

from ..exceptions import MetadataError, ReleaseInUseError
from ..models.release import Release
from ..models.target import DeploymentTarget
from ..utils.file_utils import ensure_directory, filesystem_errors, remove_path

logger = logging.getLogger(__name__)


class ReleaseStore:
    """Creates, enumerates and deletes the releases of one target

    Layout:

        <deploy_to>/
        ├── current -> releases/<version>
        ├── releases/<version>/
        └── shared/
        <cache_root>/artifact_deploys/<name>/<version>/<artifact>
    """

    def __init__(self, target: DeploymentTarget):
        """Initialize release store

        Args:
            target: Deployment target the store manages
        """
        self.target = target

    def release_path(self, version: str) -> Path:
        """Release directory for a version"""
        return self.target.releases_path / version

    def cache_version_path(self, version: str) -> Path:
        """Artifact cache directory for a version"""
        return self.target.artifact_cache / version

    def current_version(self) -> Optional[str]:
        """Version the current pointer names

        Reads the `current` symlink; when `current` exists but is not a
        symlink, the `.symlinks` metadata file is consulted instead.

        Returns:
            Current version, or None when nothing has been deployed

        Raises:
            MetadataError: If the metadata file is needed but missing
        """
        current = self.target.current_path

        if current.is_symlink():
            if not current.exists():
                logger.warning(f"Current pointer {current} is dangling, ignoring it")
                return None
            return Path(os.readlink(current)).name

        if not current.exists():
            return None

        metadata_file = self.target.symlinks_metadata_path
        if not metadata_file.exists():
            raise MetadataError(
                f"{current} is not a symlink and metadata file {metadata_file} doesn't exist"
            )

        try:
            with open(metadata_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise MetadataError(f"Cannot read metadata file {metadata_file}: {e}") from e

        if not isinstance(data, dict) or not data.get('current'):
            raise MetadataError(f"Metadata file {metadata_file} has no 'current' entry")

        return str(data['current'])

    def list_releases(self) -> List[Release]:
        """All release directories, oldest first"""
        releases_dir = self.target.releases_path
        if not releases_dir.is_dir():
            return []

        with filesystem_errors(f"listing {releases_dir}"):
            releases = [
                Release.from_path(entry)
                for entry in releases_dir.iterdir()
                if entry.is_dir()
            ]

        return sorted(releases, key=lambda r: (r.mtime, r.version))

    def list_previous_releases(self) -> List[Release]:
        """Releases other than the current one, sorted by mtime (oldest first)"""
        current = self.current_version()
        return [r for r in self.list_releases() if r.version != current]

    def list_previous_versions(self) -> List[str]:
        """Version numbers of the previous releases"""
        return [r.version for r in self.list_previous_releases()]

    def list_cached_versions(self) -> List[str]:
        """Versions with an artifact in the cache"""
        cache_dir = self.target.artifact_cache
        if not cache_dir.is_dir():
            return []
        return sorted(entry.name for entry in cache_dir.iterdir() if entry.is_dir())

    def create_release_skeleton(self, version: Optional[str] = None) -> List[Path]:
        """Create the cache, release and shared directories

        Pre-existing directories are not an error.

        Args:
            version: Release version (defaults to the target's version)

        Returns:
            Created or existing directories
        """
        version = version or self.target.version
        paths = [
            self.cache_version_path(version),
            self.release_path(version),
            self.target.shared_path,
        ]

        for path in paths:
            logger.info(f"{self.target.name}: Creating {path}")
            ensure_directory(path, self.target.owner, self.target.group, self.target.dir_mode)

        return paths

    def delete_release(self, version: str) -> None:
        """Delete a release directory together with its cached artifact

        Raises:
            ReleaseInUseError: If the version is the current release
        """
        if version == self.current_version():
            raise ReleaseInUseError(version)

        for path in (self.cache_version_path(version), self.release_path(version)):
            with filesystem_errors(f"deleting {path}"):
                if remove_path(path):
                    logger.info(f"{self.target.name}: Deleted {path}")

    def delete_release_directory(self, version: str) -> bool:
        """Delete only the release directory of a version

        Returns:
            True if a directory was removed
        """
        path = self.release_path(version)
        with filesystem_errors(f"deleting {path}"):
            removed = remove_path(path)
        if removed:
            logger.info(f"{self.target.name}: Deleted release directory {path}")
        return removed

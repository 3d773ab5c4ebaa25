"""Shared directories, release symlinks and the current pointer"""

import errno
import logging
from pathlib import Path
from typing import Dict, List

import yaml

from ..constants import CURRENT_LINK_NAME, MSG_LINK_UPDATED
from ..exceptions import FilesystemError
from ..models.target import DeploymentTarget
from ..utils.file_utils import (
    apply_ownership,
    ensure_directory,
    filesystem_errors,
    remove_path,
    replace_symlink,
)

logger = logging.getLogger(__name__)

# errno values meaning the filesystem cannot host a symlink
SYMLINK_UNSUPPORTED = {errno.EPERM, errno.EOPNOTSUPP, errno.ENOSYS}


class LinkOrchestrator:
    """Wires a release into shared storage and makes it current"""

    def __init__(self, target: DeploymentTarget):
        """Initialize link orchestrator

        Args:
            target: Deployment target
        """
        self.target = target

    def materialize_links(self, release_path: Path) -> Dict[str, str]:
        """Create shared directories and link them into the release

        Every `symlinks` entry maps a directory under shared/ to a path
        inside the release. Entries are independent of each other.

        Args:
            release_path: Release directory

        Returns:
            Mapping of created link -> link target
        """
        created = {}

        for shared_name, relative_path in self.target.symlinks.items():
            shared_dir = self.target.shared_path / shared_name
            link = release_path / relative_path

            logger.info(
                f"{self.target.name}: Creating and linking {shared_dir} to {link}"
            )
            ensure_directory(shared_dir, self.target.owner, self.target.group, self.target.dir_mode)

            with filesystem_errors(f"linking {link} to {shared_dir}"):
                link.parent.mkdir(parents=True, exist_ok=True)
                if link.exists() and not link.is_symlink() and not link.is_dir():
                    remove_path(link)
                replace_symlink(link, shared_dir)
                apply_ownership(link, self.target.owner, self.target.group)

            logger.debug(MSG_LINK_UPDATED.format(link=link, target=shared_dir))
            created[str(link)] = str(shared_dir)

        self.ensure_shared_directories()
        return created

    def ensure_shared_directories(self) -> List[Path]:
        """Create the configured subdirectories of shared/"""
        paths = []
        for directory in self.target.shared_directories:
            path = self.target.shared_path / directory
            logger.info(f"{self.target.name}: Creating {path}")
            paths.append(
                ensure_directory(path, self.target.owner, self.target.group, self.target.dir_mode)
            )
        return paths

    def promote_current(self, release_path: Path) -> Path:
        """Point `current` at a release

        The link is swapped atomically. When the filesystem cannot host a
        symlink, the version is recorded in the `.symlinks` metadata file.

        Args:
            release_path: Release directory to make current

        Returns:
            Path to the current pointer
        """
        current = self.target.current_path

        try:
            replace_symlink(current, release_path)
        except OSError as e:
            if e.errno not in SYMLINK_UNSUPPORTED:
                raise FilesystemError(
                    f"Filesystem error while linking {current} to {release_path}: {e}"
                ) from e
            logger.warning(
                f"{self.target.name}: Cannot create symlink {current} ({e}), "
                f"recording current release in {self.target.symlinks_metadata_path}"
            )
            return self._write_metadata(release_path.name)

        with filesystem_errors(f"changing ownership of {current}"):
            apply_ownership(current, self.target.owner, self.target.group)

        logger.info(
            f"{self.target.name}: "
            + MSG_LINK_UPDATED.format(link=current, target=release_path)
        )
        return current

    def _write_metadata(self, version: str) -> Path:
        metadata_file = self.target.symlinks_metadata_path
        with filesystem_errors(f"writing {metadata_file}"):
            data = {}
            if metadata_file.exists():
                with open(metadata_file, 'r') as f:
                    data = yaml.safe_load(f) or {}
            data[CURRENT_LINK_NAME] = version

            # `current` must exist for the metadata file to be consulted
            self.target.current_path.mkdir(parents=True, exist_ok=True)

            with open(metadata_file, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False)
            apply_ownership(metadata_file, self.target.owner, self.target.group)
        return metadata_file

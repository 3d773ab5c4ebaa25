"""Artifact extraction into release directories"""

import logging
import os
import shutil
import tarfile
import zipfile
from pathlib import Path
from typing import Optional

from ..constants import (
    ARCHIVE_SUFFIXES,
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_DELAY,
    SUPPORTED_EXTENSIONS,
    TARFILE_MODES,
    ArchiveFormat,
)
from ..exceptions import ExtractionError, FilesystemError, UnsupportedFormatError
from ..utils.file_utils import apply_ownership, copy_path, filesystem_errors
from ..utils.retry import retry_call

logger = logging.getLogger(__name__)


def detect_archive_format(artifact_path: Path) -> Optional[ArchiveFormat]:
    """
    Detect archive format from the filename suffix

    Matching is case-sensitive, as extraction tools treat `.TGZ` and `.tgz`
    differently.

    Args:
        artifact_path: Path to the artifact

    Returns:
        Archive format, or None if the suffix is not supported
    """
    name = artifact_path.name
    for suffix, archive_format in ARCHIVE_SUFFIXES:
        if name.endswith(suffix):
            return archive_format
    return None


class Unpacker:
    """Extracts or copies a cached artifact into a release directory"""

    def __init__(self,
                 owner: Optional[str] = None,
                 group: Optional[str] = None,
                 retries: int = DEFAULT_RETRY_COUNT,
                 retry_delay: float = DEFAULT_RETRY_DELAY):
        """
        Initialize unpacker

        Args:
            owner: Owner applied to extracted files
            group: Group applied to extracted files
            retries: Additional attempts for a failing extraction or copy
            retry_delay: Initial delay between attempts
        """
        self.owner = owner
        self.group = group
        self.retries = retries
        self.retry_delay = retry_delay

    def unpack(self,
               cached_artifact: Path,
               release_path: Path,
               is_tarball: bool = True,
               remove_top_level_directory: bool = False) -> None:
        """
        Unpack the artifact into the release directory

        Args:
            cached_artifact: Artifact in the cache
            release_path: Release directory (created if missing)
            is_tarball: Extract the artifact; when False it is copied as-is
            remove_top_level_directory: Flatten a single wrapping directory

        Raises:
            UnsupportedFormatError: If the extension is not a supported archive
            ExtractionError: If extraction still fails after all retries
        """
        if not is_tarball:
            self.copy(cached_artifact, release_path)
            return

        archive_format = detect_archive_format(cached_artifact)
        if archive_format is None:
            raise UnsupportedFormatError(str(cached_artifact), SUPPORTED_EXTENSIONS)

        release_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Extracting {cached_artifact} to {release_path}")

        try:
            retry_call(
                self._extract, cached_artifact, release_path, archive_format,
                retries=self.retries,
                delay=self.retry_delay,
                exceptions=(OSError, tarfile.TarError, zipfile.BadZipFile, EOFError),
                description=f"extract {cached_artifact.name}",
            )
        except PermissionError as e:
            raise FilesystemError(f"Permission denied while extracting {cached_artifact}: {e}") from e
        except (OSError, tarfile.TarError, zipfile.BadZipFile, EOFError) as e:
            raise ExtractionError(f"Failed to extract {cached_artifact}: {e}") from e

        if remove_top_level_directory:
            self.remove_top_level_directory(release_path)

        self._apply_ownership(release_path)

    def copy(self, cached_artifact: Path, release_path: Path) -> None:
        """Copy the artifact into the release directory without extracting"""
        release_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Copying {cached_artifact} to {release_path}")

        try:
            retry_call(
                copy_path, cached_artifact, release_path,
                retries=self.retries,
                delay=self.retry_delay,
                exceptions=(OSError,),
                description=f"copy {cached_artifact.name}",
            )
        except PermissionError as e:
            raise FilesystemError(f"Permission denied while copying {cached_artifact}: {e}") from e
        except OSError as e:
            raise ExtractionError(f"Failed to copy {cached_artifact}: {e}") from e

        self._apply_ownership(release_path)

    def remove_top_level_directory(self, release_path: Path) -> bool:
        """
        Promote the children of a single wrapping directory into the release

        Skipped unless the release holds exactly one entry and that entry is a
        directory.

        Returns:
            True if the wrapper was removed
        """
        children = list(release_path.iterdir())
        if len(children) != 1:
            return False

        wrapper = children[0]
        if wrapper.is_symlink() or not wrapper.is_dir():
            return False

        logger.info(f"Removing top level directory {wrapper.name} from {release_path}")

        with filesystem_errors(f"flattening {wrapper}"):
            # Move the wrapper aside first, it may contain an entry with its own name
            staging = release_path / f".{wrapper.name}.unwrap"
            wrapper.rename(staging)
            for child in staging.iterdir():
                shutil.move(str(child), str(release_path / child.name))
            staging.rmdir()

        return True

    def _extract(self, archive: Path, destination: Path, archive_format: ArchiveFormat) -> None:
        if archive_format == ArchiveFormat.ZIP:
            with zipfile.ZipFile(archive) as zf:
                for member in zf.namelist():
                    self._check_member(destination, member)
                zf.extractall(destination)
            return

        with tarfile.open(archive, TARFILE_MODES[archive_format]) as tf:
            members = tf.getmembers()
            for member in members:
                self._check_member(destination, member.name)
                if member.issym():
                    link_base = os.path.dirname(member.name)
                    self._check_member(destination, os.path.join(link_base, member.linkname))
                elif member.islnk():
                    self._check_member(destination, member.linkname)
            # Members are checked above; release symlinks into shared/ must stay writable
            if hasattr(tarfile, "data_filter"):
                tf.extractall(destination, members=members, filter="fully_trusted")
            else:
                tf.extractall(destination, members=members)

    @staticmethod
    def _check_member(destination: Path, member_name: str) -> None:
        """Reject archive members that would land outside the release"""
        if os.path.isabs(member_name):
            raise ExtractionError(f"Archive member {member_name!r} is an absolute path")
        normalized = os.path.normpath(member_name)
        if normalized == os.pardir or normalized.startswith(os.pardir + os.sep):
            raise ExtractionError(f"Archive member {member_name!r} escapes {destination}")

    def _apply_ownership(self, release_path: Path) -> None:
        if not (self.owner or self.group):
            return

        with filesystem_errors(f"changing ownership of {release_path}"):
            apply_ownership(release_path, self.owner, self.group)
            for root, dirs, files in os.walk(release_path):
                for name in dirs + files:
                    apply_ownership(Path(root) / name, self.owner, self.group)

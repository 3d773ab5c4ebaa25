"""Artifact retrieval into the version-scoped cache"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..exceptions import ChecksumMismatchError, ConfigError, SourceNotFoundError
from ..models.target import DeploymentTarget
from ..utils.file_utils import (
    calculate_file_checksum,
    copy_path,
    filesystem_errors,
    files_identical,
    remove_path,
)
from ..utils.retry import retry_call

logger = logging.getLogger(__name__)


class ArtifactFetcher(ABC):
    """Fetches a remote artifact into a local file

    Download, repository checksum verification and retries are owned by the
    implementation; the retriever only decides when to call it.
    """

    @abstractmethod
    def fetch(self, location: str, destination: Path, checksum: Optional[str] = None) -> Path:
        """
        Fetch an artifact

        Args:
            location: Remote artifact location
            destination: Local file to write
            checksum: Expected checksum, if known

        Returns:
            Path to the fetched file
        """
        pass


class ArtifactRetriever:
    """Copies the raw artifact into the cache when it changed"""

    def __init__(self, target: DeploymentTarget, fetcher: Optional[ArtifactFetcher] = None):
        """Initialize artifact retriever

        Args:
            target: Deployment target
            fetcher: Collaborator for remote artifact locations
        """
        self.target = target
        self.fetcher = fetcher

    @property
    def source(self) -> Path:
        return Path(self.target.artifact_location).expanduser()

    @property
    def cached_path(self) -> Path:
        return self.target.cached_artifact_path

    def artifact_changed(self) -> bool:
        """Whether the cached copy is missing or differs from the source

        Raises:
            SourceNotFoundError: If a local source does not exist
        """
        if self.target.is_remote:
            if not self.cached_path.exists():
                return True
            if self.target.artifact_checksum:
                return not self._checksum_matches(self.cached_path)
            return False

        if not self.source.exists():
            raise SourceNotFoundError(self.target.artifact_location)

        if not files_identical(self.source, self.cached_path):
            return True
        if self.target.artifact_checksum and self.cached_path.is_file():
            return not self._checksum_matches(self.cached_path)
        return False

    def retrieve(self) -> bool:
        """Retrieve the artifact into the cache

        Returns:
            True if the cache was updated

        Raises:
            SourceNotFoundError: If a local source does not exist
            ChecksumMismatchError: If the cached copy fails the configured checksum
        """
        if self.target.is_remote:
            changed = self._retrieve_remote()
        else:
            changed = self._retrieve_local()

        if self.target.artifact_checksum and not self.cached_path.is_dir():
            actual = calculate_file_checksum(self.cached_path)
            if actual != self.target.artifact_checksum.lower():
                # A rejected artifact must not look up to date on the next run
                with filesystem_errors(f"discarding {self.cached_path}"):
                    remove_path(self.cached_path)
                raise ChecksumMismatchError(
                    str(self.cached_path), self.target.artifact_checksum, actual
                )

        return changed

    def _retrieve_local(self) -> bool:
        if not self.source.exists():
            raise SourceNotFoundError(self.target.artifact_location)

        if files_identical(self.source, self.cached_path):
            logger.info(f"{self.target.name}: Cached artifact {self.cached_path} is up to date")
            return False

        logger.info(
            f"{self.target.name}: Retrieving artifact local path {self.source} "
            f"to {self.cached_path}"
        )
        with filesystem_errors(f"copying {self.source} to {self.cached_path}"):
            if self.cached_path.exists() or self.cached_path.is_symlink():
                remove_path(self.cached_path)
            retry_call(
                copy_path, self.source, self.cached_path,
                exceptions=(OSError,),
                description=f"copy artifact {self.source}"
            )
        return True

    def _retrieve_remote(self) -> bool:
        if not self.artifact_changed():
            logger.info(f"{self.target.name}: Cached artifact {self.cached_path} is up to date")
            return False

        if self.fetcher is None:
            raise ConfigError(
                f"Artifact location {self.target.artifact_location} is remote "
                "and no fetcher was configured"
            )

        logger.info(
            f"{self.target.name}: Fetching artifact {self.target.artifact_location} "
            f"to {self.cached_path}"
        )
        self.cached_path.parent.mkdir(parents=True, exist_ok=True)
        self.fetcher.fetch(
            self.target.artifact_location,
            self.cached_path,
            self.target.artifact_checksum,
        )

        if not self.cached_path.exists():
            raise SourceNotFoundError(self.target.artifact_location)
        return True

    def _checksum_matches(self, path: Path) -> bool:
        return calculate_file_checksum(path) == self.target.artifact_checksum.lower()

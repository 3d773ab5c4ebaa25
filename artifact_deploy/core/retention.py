"""Retention of previous releases"""

import logging
from typing import List

from .release_store import ReleaseStore

logger = logging.getLogger(__name__)


class RetentionManager:
    """Deletes releases beyond the keep count, oldest first"""

    def __init__(self, store: ReleaseStore, keep: int):
        """Initialize retention manager

        Args:
            store: Release store of the target
            keep: Number of previous releases to keep besides the current one
        """
        self.store = store
        self.keep = keep

    def releases_to_prune(self) -> List[str]:
        """Versions that a prune would delete, oldest first"""
        current = self.store.current_version()
        previous = [
            release.version
            for release in self.store.list_previous_releases()
            if release.version != current
        ]

        total = len(previous)
        if total <= self.keep:
            return []

        return previous[:total - self.keep]

    def prune(self) -> List[str]:
        """Delete old releases and their cached artifacts

        A deletion failure is fatal and stops the prune.

        Returns:
            Deleted versions, oldest first
        """
        to_delete = self.releases_to_prune()
        if not to_delete:
            return []

        name = self.store.target.name
        total = len(to_delete) + self.keep
        logger.info(
            f"{name}: Deleting {len(to_delete)} of {total} old versions (keeping: {self.keep})"
        )

        deleted = []
        for version in to_delete:
            self.store.delete_release(version)
            logger.info(f"{name}: {version} deleted")
            deleted.append(version)

        return deleted

"""Install decision logic"""

import logging
from typing import Iterable, Optional

from ..models.release import InstallDecision, Resolution

logger = logging.getLogger(__name__)


class VersionResolver:
    """Decides whether a requested version needs installing

    The decision is a pure function of the current version, the versions of
    the previous releases and the force flag; reading those from disk is the
    release store's job.
    """

    def __init__(self, name: str = ""):
        """Initialize version resolver

        Args:
            name: Target name used in log messages
        """
        self.name = name

    def resolve(self,
                requested_version: str,
                current_version: Optional[str],
                previous_versions: Iterable[str],
                force: bool = False) -> Resolution:
        """
        Resolve the install decision for a requested version

        Args:
            requested_version: Version the target asks for
            current_version: Version the current pointer names, or None
            previous_versions: Versions of the non-current releases
            force: Always redeploy

        Returns:
            Resolution with the decision and the facts behind it
        """
        in_history = requested_version in set(previous_versions)
        resolution = Resolution(
            decision=self.decide(
                has_current=current_version is not None,
                equals_current=requested_version == current_version,
                in_history=in_history,
                force=force,
            ),
            requested_version=requested_version,
            current_version=current_version,
            in_history=in_history,
        )

        if resolution.decision == InstallDecision.FORCE_INSTALL:
            logger.info(f"{self.name}: Force-installing version {requested_version}")
        elif resolution.decision == InstallDecision.INSTALL:
            logger.info(f"{self.name}: Installing new version {requested_version}")
        else:
            logger.info(f"{self.name}: Version {requested_version} has already been installed")

        return resolution

    @staticmethod
    def decide(has_current: bool,
               equals_current: bool,
               in_history: bool,
               force: bool = False) -> InstallDecision:
        """
        Total decision over the three facts about the requested version

        Equality with the current version wins over history membership, and a
        missing current version means nothing is installed yet.
        """
        if force:
            return InstallDecision.FORCE_INSTALL
        if not has_current:
            return InstallDecision.INSTALL
        if equals_current:
            return InstallDecision.ALREADY_CURRENT
        if in_history:
            return InstallDecision.ALREADY_CURRENT
        return InstallDecision.INSTALL

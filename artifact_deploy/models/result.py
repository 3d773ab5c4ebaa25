"""Deploy and pre-seed result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .release import Resolution


class OperationStatus(Enum):
    SUCCESS = "success"       # a release was installed (or an artifact staged)
    SKIPPED = "skipped"       # version already in place, only current re-pointed
    IN_PROGRESS = "in_progress"


class DeployState(Enum):
    """Last state reached by the deployment controller"""
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    UNPACKING = "unpacking"
    LINKING = "linking"
    HOOKS = "hooks"
    PRUNED = "pruned"


@dataclass
class Result:
    """Timing, status and warnings shared by every run

    Failures are raised as exceptions, so a finished result is either a
    success or a skip.
    """

    status: OperationStatus = OperationStatus.IN_PROGRESS
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        return self.status in (OperationStatus.SUCCESS, OperationStatus.SKIPPED)

    @property
    def duration(self) -> Optional[float]:
        """Seconds between start and finish, None while running"""
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def complete(self, status: OperationStatus) -> None:
        self.status = status
        self.finished_at = datetime.now()


@dataclass
class DeployResult(Result):
    """What a deploy or pre-seed run did to one target"""

    action: str = "deploy"
    name: Optional[str] = None
    version: Optional[str] = None
    release_path: Optional[Path] = None
    cached_artifact: Optional[Path] = None
    resolution: Optional[Resolution] = None
    deployed: bool = False
    artifact_changed: bool = False
    pruned_versions: List[str] = field(default_factory=list)
    hooks_run: List[str] = field(default_factory=list)
    state: DeployState = DeployState.IDLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "action": self.action,
            "name": self.name,
            "version": self.version,
            "release_path": str(self.release_path) if self.release_path else None,
            "cached_artifact": str(self.cached_artifact) if self.cached_artifact else None,
            "decision": self.resolution.decision.value if self.resolution else None,
            "deployed": self.deployed,
            "artifact_changed": self.artifact_changed,
            "pruned_versions": self.pruned_versions,
            "hooks_run": self.hooks_run,
            "warnings": self.warnings,
            "duration": self.duration,
        }

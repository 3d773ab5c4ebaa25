# artifact_deploy/models/release.py
"""Release models for the deployment engine"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class Release:
    """One unpacked, version-identified installation under releases/"""
    version: str
    path: Path
    mtime: float = 0.0

    @classmethod
    def from_path(cls, path: Path) -> 'Release':
        """Create from a release directory"""
        return cls(version=path.name, path=path, mtime=path.lstat().st_mtime)

    @property
    def modified_at(self) -> datetime:
        return datetime.fromtimestamp(self.mtime)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'version': self.version,
            'path': str(self.path),
            'modified_at': self.modified_at.isoformat(),
        }


class InstallDecision(Enum):
    """Outcome of comparing the requested version with what is on disk"""
    INSTALL = "install"
    ALREADY_CURRENT = "already_current"
    FORCE_INSTALL = "force_install"


@dataclass
class Resolution:
    """Install decision together with the facts it was made from"""
    decision: InstallDecision
    requested_version: str
    current_version: Optional[str] = None
    in_history: bool = False

    @property
    def should_install(self) -> bool:
        return self.decision != InstallDecision.ALREADY_CURRENT

    @property
    def is_rollback(self) -> bool:
        """Requested version is a previous release, not the live one"""
        return (self.decision == InstallDecision.ALREADY_CURRENT
                and self.current_version is not None
                and self.requested_version != self.current_version
                and self.in_history)


@dataclass
class DeploymentStatus:
    """Current on-disk state of a deployment target"""
    name: str
    deploy_to: str
    current_version: Optional[str] = None
    previous_releases: List[Release] = field(default_factory=list)
    cached_versions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'name': self.name,
            'deploy_to': self.deploy_to,
            'current_version': self.current_version,
            'previous_releases': [r.to_dict() for r in self.previous_releases],
            'cached_versions': self.cached_versions,
        }

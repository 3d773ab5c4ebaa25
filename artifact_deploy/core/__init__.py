"""Core functionality for artifact-deploy"""

from .version_resolver import VersionResolver
from .release_store import ReleaseStore
from .artifact_retriever import ArtifactRetriever, ArtifactFetcher
from .unpacker import Unpacker, detect_archive_format
from .link_orchestrator import LinkOrchestrator
from .retention import RetentionManager
from .hooks import HookRunner, command_hook

__all__ = [
    "VersionResolver",
    "ReleaseStore",
    "ArtifactRetriever",
    "ArtifactFetcher",
    "Unpacker",
    "detect_archive_format",
    "LinkOrchestrator",
    "RetentionManager",
    "HookRunner",
    "command_hook",
]

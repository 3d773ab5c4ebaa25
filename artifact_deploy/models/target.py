"""Deployment target model"""

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlparse

from ..exceptions import ConfigError
from ..constants import (
    CACHE_DEPLOYS_DIR,
    CURRENT_LINK_NAME,
    DEFAULT_CACHE_DIR,
    DEFAULT_DIR_MODE,
    DEFAULT_KEEP,
    DEFAULT_SHARED_DIRECTORIES,
    ENV_CACHE_DIR,
    RELEASES_DIR,
    REMOTE_LOCATION_PATTERN,
    SHARED_DIR,
    SYMLINKS_METADATA_FILE,
    USER_VALID_PATTERN,
    WHITESPACE_PATTERN,
    HookPoint,
)

Hook = Callable[[], Any]


def default_cache_root() -> Path:
    """Cache root from the environment, falling back to the user cache dir"""
    cache_dir = os.environ.get(ENV_CACHE_DIR)
    if cache_dir:
        return Path(cache_dir).expanduser().resolve()
    return Path(DEFAULT_CACHE_DIR).expanduser()


@dataclass(frozen=True)
class DeploymentTarget:
    """One named, configured deployment of a single artifact lineage.

    Validated eagerly on construction so that an invalid configuration is
    rejected before anything touches the filesystem.
    """

    name: str
    deploy_to: Path
    version: str
    artifact_location: str
    owner: Optional[str] = None
    group: Optional[str] = None
    keep: int = DEFAULT_KEEP
    is_tarball: bool = True
    force: bool = False
    remove_on_force: bool = False
    remove_top_level_directory: bool = False
    should_migrate: bool = False
    symlinks: Dict[str, str] = field(default_factory=dict)
    shared_directories: List[str] = field(
        default_factory=lambda: list(DEFAULT_SHARED_DIRECTORIES)
    )
    artifact_checksum: Optional[str] = None
    environment: Dict[str, str] = field(default_factory=dict)
    cache_root: Path = field(default_factory=default_cache_root)
    dir_mode: int = DEFAULT_DIR_MODE
    hooks: Dict[str, Hook] = field(default_factory=dict)

    def __post_init__(self):
        """Validate and normalize target configuration"""
        if not self.name:
            raise ConfigError("Target name is required")
        if WHITESPACE_PATTERN.search(self.name):
            raise ConfigError(
                f"Invalid target name {self.name!r}: the name is used as a cache "
                "path segment and cannot contain whitespace. The preferred usage "
                "is to use the name of the artifact."
            )
        if "/" in self.name or self.name in (".", ".."):
            raise ConfigError(f"Invalid target name {self.name!r}")

        if not self.deploy_to:
            raise ConfigError(f"Target {self.name}: 'deploy_to' is required")
        if self.version is None or self.version == "":
            raise ConfigError(f"Target {self.name}: 'version' is required")
        object.__setattr__(self, "version", str(self.version))
        if "/" in self.version or self.version in (".", ".."):
            raise ConfigError(f"Target {self.name}: invalid version {self.version!r}")
        if not self.artifact_location:
            raise ConfigError(f"Target {self.name}: 'artifact_location' is required")

        for attr in ("owner", "group"):
            value = getattr(self, attr)
            if value is not None and not USER_VALID_PATTERN.match(str(value)):
                raise ConfigError(f"Target {self.name}: invalid {attr} {value!r}")

        if isinstance(self.keep, bool) or not isinstance(self.keep, int) or self.keep < 0:
            raise ConfigError(
                f"Target {self.name}: 'keep' must be a non-negative integer, got {self.keep!r}"
            )

        for shared_name, relative_path in self.symlinks.items():
            if not shared_name or not relative_path:
                raise ConfigError(f"Target {self.name}: empty symlink entry")
            if Path(relative_path).is_absolute():
                raise ConfigError(
                    f"Target {self.name}: symlink path {relative_path!r} must be "
                    "relative to the release directory"
                )

        valid_hooks = {point.value for point in HookPoint}
        for hook_name, hook in self.hooks.items():
            if hook_name not in valid_hooks:
                raise ConfigError(f"Target {self.name}: unknown hook {hook_name!r}")
            if hook is not None and not callable(hook):
                raise ConfigError(f"Target {self.name}: hook {hook_name!r} is not callable")

        # Frozen dataclass, normalize through object.__setattr__
        object.__setattr__(self, "deploy_to", Path(self.deploy_to).expanduser())
        object.__setattr__(self, "cache_root", Path(self.cache_root).expanduser())

    @property
    def releases_path(self) -> Path:
        return self.deploy_to / RELEASES_DIR

    @property
    def release_path(self) -> Path:
        """Release directory for the requested version"""
        return self.releases_path / self.version

    @property
    def current_path(self) -> Path:
        return self.deploy_to / CURRENT_LINK_NAME

    @property
    def shared_path(self) -> Path:
        return self.deploy_to / SHARED_DIR

    @property
    def symlinks_metadata_path(self) -> Path:
        return self.deploy_to / SYMLINKS_METADATA_FILE

    @property
    def artifact_cache(self) -> Path:
        """Per-target cache directory"""
        return self.cache_root / CACHE_DEPLOYS_DIR / self.name

    @property
    def artifact_cache_version_path(self) -> Path:
        return self.artifact_cache / self.version

    @property
    def is_remote(self) -> bool:
        """Whether the artifact location is a URL rather than a local path"""
        return bool(REMOTE_LOCATION_PATTERN.match(self.artifact_location))

    @property
    def artifact_filename(self) -> str:
        """Basename of the artifact location

        Example:
            "http://some-site.com/my-artifact.jar" -> "my-artifact.jar"
        """
        if self.is_remote:
            return os.path.basename(urlparse(self.artifact_location).path.rstrip("/"))
        return os.path.basename(self.artifact_location.rstrip("/"))

    @property
    def cached_artifact_path(self) -> Path:
        return self.artifact_cache_version_path / self.artifact_filename

    def get_hook(self, hook_point: Union[HookPoint, str]) -> Optional[Hook]:
        """Get the hook registered for a hook point, if any"""
        name = hook_point.value if isinstance(hook_point, HookPoint) else hook_point
        return self.hooks.get(name)

    def with_overrides(self, **changes) -> "DeploymentTarget":
        """Copy of this target with some fields replaced (re-validated)"""
        changes = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (hooks are reported by name only)"""
        return {
            "name": self.name,
            "deploy_to": str(self.deploy_to),
            "version": self.version,
            "artifact_location": self.artifact_location,
            "owner": self.owner,
            "group": self.group,
            "keep": self.keep,
            "is_tarball": self.is_tarball,
            "force": self.force,
            "remove_on_force": self.remove_on_force,
            "remove_top_level_directory": self.remove_top_level_directory,
            "should_migrate": self.should_migrate,
            "symlinks": dict(self.symlinks),
            "shared_directories": list(self.shared_directories),
            "artifact_checksum": self.artifact_checksum,
            "environment": dict(self.environment),
            "cache_root": str(self.cache_root),
            "hooks": sorted(name for name, hook in self.hooks.items() if hook),
        }

    @classmethod
    def from_dict(cls,
                  data: Dict[str, Any],
                  name: Optional[str] = None,
                  hooks: Optional[Dict[str, Hook]] = None) -> "DeploymentTarget":
        """Create from dictionary

        Args:
            data: Target fields, as found in a configuration file
            name: Target name (overrides data['name'])
            hooks: Hook callables keyed by hook name

        Returns:
            Validated DeploymentTarget
        """
        known = {f.name for f in dataclasses.fields(cls)} - {"hooks"}
        unknown = set(data) - known - {"name", "hooks", "location"}
        if unknown:
            raise ConfigError(f"Unknown target fields: {', '.join(sorted(unknown))}")

        kwargs = {key: value for key, value in data.items() if key in known}
        kwargs["name"] = name or data.get("name")
        if "artifact_location" not in kwargs and "location" in data:
            kwargs["artifact_location"] = data["location"]

        for required in ("name", "deploy_to", "version", "artifact_location"):
            if kwargs.get(required) in (None, ""):
                raise ConfigError(f"Missing required target field: {required}")

        kwargs["version"] = str(kwargs["version"])
        if isinstance(kwargs.get("dir_mode"), str):
            try:
                kwargs["dir_mode"] = int(kwargs["dir_mode"], 8)
            except ValueError:
                raise ConfigError(f"Invalid dir_mode: {data['dir_mode']!r}")
        if kwargs.get("symlinks") is None:
            kwargs.pop("symlinks", None)
        if kwargs.get("shared_directories") is None:
            kwargs.pop("shared_directories", None)
        if kwargs.get("cache_root") is None:
            kwargs.pop("cache_root", None)

        return cls(hooks=dict(hooks or {}), **kwargs)

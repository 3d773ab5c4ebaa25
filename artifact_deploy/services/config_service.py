"""Configuration loading service"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from ..core.hooks import command_hook
from ..exceptions import ConfigError
from ..models.target import DeploymentTarget

logger = logging.getLogger(__name__)


class ConfigService:
    """Loads deployment targets from a YAML configuration file

    The file holds either a single target:

        name: my-app
        deploy_to: /srv/my-app
        version: 1.0.0
        artifact_location: /tmp/my-app-1.0.0.tar.gz

    or several under `targets:`, keyed by name. Top-level `cache_root`,
    `owner`, `group` and `environment` act as defaults for every target.
    Hooks are shell commands (string or argv list) under `hooks:`.
    """

    DEFAULT_KEYS = ("cache_root", "owner", "group", "environment", "keep")

    def __init__(self, config_path: Union[str, Path]):
        """Initialize config service

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        self._data: Optional[Dict[str, Any]] = None

    @property
    def data(self) -> Dict[str, Any]:
        """Raw configuration (lazy load)"""
        if self._data is None:
            self._data = self.load()
        return self._data

    def load(self) -> Dict[str, Any]:
        """Load configuration from file

        Returns:
            Parsed configuration mapping

        Raises:
            ConfigError: If the file is missing or not a YAML mapping
        """
        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {self.config_path} must be a mapping")

        return data

    def target_names(self) -> List[str]:
        """Names of the configured targets"""
        targets = self.data.get("targets")
        if targets is None:
            return [self.data.get("name")] if self.data.get("name") else []
        if not isinstance(targets, dict):
            raise ConfigError("'targets' must be a mapping of name to target")
        return list(targets)

    def load_targets(self) -> Dict[str, DeploymentTarget]:
        """Build every configured target"""
        return {name: self.get_target(name) for name in self.target_names()}

    def get_target(self, name: Optional[str] = None, **overrides) -> DeploymentTarget:
        """Build one target

        Args:
            name: Target name (optional when only one target is configured)
            **overrides: Field values replacing the configured ones

        Returns:
            Validated deployment target

        Raises:
            ConfigError: If the target is unknown or invalid
        """
        names = self.target_names()
        if name is None:
            if len(names) != 1:
                raise ConfigError(
                    f"Configuration defines {len(names)} targets, please choose one of: "
                    f"{', '.join(names) or '(none)'}"
                )
            name = names[0]
        elif name not in names:
            raise ConfigError(f"Unknown target: {name}")

        if "targets" in self.data:
            target_data = dict(self.data["targets"][name] or {})
        else:
            target_data = {k: v for k, v in self.data.items()}

        for key in self.DEFAULT_KEYS:
            if key in self.data and key not in target_data:
                target_data[key] = self.data[key]

        target_data.update({k: v for k, v in overrides.items() if v is not None})
        return build_target(target_data, name=name)


def build_target(data: Dict[str, Any], name: Optional[str] = None) -> DeploymentTarget:
    """Build a target from a mapping, turning command hooks into callables

    Hook values may already be callables, in which case they are used as-is.
    """
    data = dict(data)
    hook_specs = data.pop("hooks", None) or {}
    if not isinstance(hook_specs, dict):
        raise ConfigError("'hooks' must be a mapping of hook name to command")

    # Validate everything but hooks before building command closures
    target = DeploymentTarget.from_dict(data, name=name)

    hooks: Dict[str, Callable[[], Any]] = {}
    for hook_name, spec in hook_specs.items():
        if spec is None:
            continue
        if callable(spec):
            hooks[hook_name] = spec
        elif isinstance(spec, (str, list)):
            hooks[hook_name] = command_hook(
                spec,
                hook_name,
                target_fields=_hook_fields(target),
                environment=target.environment,
                cwd=str(target.release_path),
            )
        else:
            raise ConfigError(f"Hook {hook_name!r} must be a command string or list")

    return target.with_overrides(hooks=hooks) if hooks else target


def _hook_fields(target: DeploymentTarget) -> Dict[str, str]:
    return {
        "name": target.name,
        "version": target.version,
        "deploy_to": str(target.deploy_to),
        "release_path": str(target.release_path),
        "shared_path": str(target.shared_path),
        "current_path": str(target.current_path),
    }

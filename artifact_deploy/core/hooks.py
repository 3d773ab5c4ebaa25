"""Lifecycle hook invocation"""

import logging
import os
import shlex
import subprocess
from typing import Callable, Dict, List, Optional, Union

from ..constants import DEFAULT_HOOK_TIMEOUT, HOOK_ENV_PREFIX, HookPoint
from ..exceptions import HookError
from ..models.target import DeploymentTarget

logger = logging.getLogger(__name__)


class HookRunner:
    """Runs the target's lifecycle hooks synchronously

    A missing hook is a no-op; a hook that raises aborts the deployment with
    a HookError.
    """

    def __init__(self, target: DeploymentTarget):
        self.target = target
        self.executed: List[str] = []

    def run(self, hook_point: HookPoint) -> bool:
        """
        Run the hook registered for a hook point

        Args:
            hook_point: Lifecycle hook point

        Returns:
            True if a hook was run
        """
        hook = self.target.get_hook(hook_point)
        if hook is None:
            return False

        logger.info(f"{self.target.name}: Running {hook_point.value} hook")
        try:
            hook()
        except Exception as e:
            raise HookError(hook_point.value, e) from e

        self.executed.append(hook_point.value)
        return True


def command_hook(command: Union[str, List[str]],
                 hook_name: str,
                 target_fields: Dict[str, str],
                 environment: Optional[Dict[str, str]] = None,
                 cwd: Optional[str] = None,
                 timeout: int = DEFAULT_HOOK_TIMEOUT) -> Callable[[], None]:
    """
    Build a zero-argument hook that runs a shell command

    The command sees the target's `environment` plus ARTIFACT_DEPLOY_*
    variables describing the deployment (name, version, paths, hook).

    Args:
        command: Shell command string or argv list
        hook_name: Hook point name, exported as ARTIFACT_DEPLOY_HOOK
        target_fields: Values exported as ARTIFACT_DEPLOY_<KEY>
        environment: Extra environment variables
        cwd: Working directory for the command
        timeout: Seconds before the command is killed

    Returns:
        Hook callable raising CalledProcessError on a non-zero exit
    """
    def run_command() -> None:
        env = os.environ.copy()
        env.update({str(k): str(v) for k, v in (environment or {}).items()})
        env[f"{HOOK_ENV_PREFIX}HOOK"] = hook_name
        for key, value in target_fields.items():
            env[f"{HOOK_ENV_PREFIX}{key.upper()}"] = str(value)

        workdir = cwd if cwd and os.path.isdir(cwd) else None
        args = command if isinstance(command, list) else ["/bin/sh", "-c", command]

        logger.debug(f"Executing hook command: {shlex.join(args)}")
        completed = subprocess.run(
            args,
            env=env,
            cwd=workdir,
            capture_output=True,
            text=True,
            timeout=timeout,
        )

        if completed.stdout:
            logger.info(f"Hook output: {completed.stdout.strip()}")
        if completed.stderr:
            logger.warning(f"Hook error: {completed.stderr.strip()}")

        completed.check_returncode()

    run_command.__name__ = f"{hook_name}_command"
    return run_command

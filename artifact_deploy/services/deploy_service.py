"""Deployment controller: the deploy and pre-seed workflows"""

import logging
from typing import Optional

from ..constants import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_DELAY,
    HookPoint,
)
from ..core import (
    ArtifactFetcher,
    ArtifactRetriever,
    HookRunner,
    LinkOrchestrator,
    ReleaseStore,
    RetentionManager,
    Unpacker,
    VersionResolver,
)
from ..models import (
    DeploymentStatus,
    DeploymentTarget,
    DeployResult,
    DeployState,
    OperationStatus,
)

logger = logging.getLogger(__name__)


class DeploymentController:
    """Drives one deployment target through the release state machine

    Idle -> Resolving -> (Fetching) -> (Unpacking) -> Linking -> (Hooks) -> Pruned

    Every step tolerates state left behind by an earlier, possibly failed,
    run. Any fatal error aborts the remaining steps; nothing is rolled back.
    """

    def __init__(self,
                 target: DeploymentTarget,
                 fetcher: Optional[ArtifactFetcher] = None,
                 retries: int = DEFAULT_RETRY_COUNT,
                 retry_delay: float = DEFAULT_RETRY_DELAY):
        """Initialize deployment controller

        Args:
            target: Deployment target
            fetcher: Collaborator for remote artifact locations
            retries: Additional attempts for extraction and copy steps
            retry_delay: Initial delay between attempts
        """
        self.target = target
        self.store = ReleaseStore(target)
        self.resolver = VersionResolver(target.name)
        self.retriever = ArtifactRetriever(target, fetcher)
        self.unpacker = Unpacker(target.owner, target.group, retries, retry_delay)
        self.links = LinkOrchestrator(target)
        self.retention = RetentionManager(self.store, target.keep)
        self.hooks = HookRunner(target)

    def deploy(self) -> DeployResult:
        """Install the target's version and make it current

        Returns:
            DeployResult describing what this run did
        """
        target = self.target
        result = self._new_result("deploy")
        logger.info(f"{target.name}: Deploying version {target.version} to {target.deploy_to}")

        self._delete_current_if_forcing()
        self.store.create_release_skeleton()
        self.links.ensure_shared_directories()

        result.state = DeployState.RESOLVING
        resolution = self.resolver.resolve(
            target.version,
            self.store.current_version(),
            self.store.list_previous_versions(),
            force=target.force,
        )
        result.resolution = resolution
        result.artifact_changed = self.retriever.artifact_changed()

        deploy = resolution.should_install or result.artifact_changed
        if not deploy and self._release_is_empty():
            logger.warning(
                f"{target.name}: Release {target.release_path} is empty, installing it again"
            )
            deploy = True
        elif resolution.is_rollback and not deploy:
            logger.warning(
                f"{target.name}: Rolling back from {resolution.current_version} "
                f"to previous release {target.version}"
            )
            result.add_warning(
                f"Rolled back from {resolution.current_version} to {target.version}"
            )
        result.deployed = deploy

        if result.artifact_changed:
            result.state = DeployState.FETCHING
            self.retriever.retrieve()
            self.hooks.run(HookPoint.AFTER_DOWNLOAD)

        if deploy:
            self._install(result)

        result.state = DeployState.HOOKS
        self.hooks.run(HookPoint.CONFIGURE)

        result.state = DeployState.LINKING
        self.links.promote_current(target.release_path)

        if deploy:
            result.state = DeployState.HOOKS
            self.hooks.run(HookPoint.RESTART)
            self.hooks.run(HookPoint.AFTER_DEPLOY)

        result.pruned_versions = self.retention.prune()
        result.state = DeployState.PRUNED

        result.hooks_run = list(self.hooks.executed)
        result.message = (
            f"Deployed {target.name}:{target.version}" if deploy
            else f"{target.name}:{target.version} already deployed"
        )
        result.complete(OperationStatus.SUCCESS if deploy else OperationStatus.SKIPPED)
        logger.info(f"{target.name}: {result.message}")
        return result

    def pre_seed(self) -> DeployResult:
        """Stage the artifact in the cache without installing it

        Returns:
            DeployResult with artifact_changed set
        """
        target = self.target
        result = self._new_result("pre_seed")
        logger.info(f"{target.name}: Pre-seeding version {target.version}")

        self.store.create_release_skeleton()

        result.state = DeployState.FETCHING
        result.artifact_changed = self.retriever.retrieve()
        if result.artifact_changed:
            self.hooks.run(HookPoint.AFTER_DOWNLOAD)

        result.hooks_run = list(self.hooks.executed)
        result.message = f"Pre-seeded {target.name}:{target.version}"
        result.complete(OperationStatus.SUCCESS)
        return result

    def status(self) -> DeploymentStatus:
        """Read the target's current pointer, history and cache"""
        return DeploymentStatus(
            name=self.target.name,
            deploy_to=str(self.target.deploy_to),
            current_version=self.store.current_version(),
            previous_releases=self.store.list_previous_releases(),
            cached_versions=self.store.list_cached_versions(),
        )

    def _install(self, result: DeployResult) -> None:
        """Unpack the cached artifact and wire the release up"""
        target = self.target

        self.hooks.run(HookPoint.BEFORE_DEPLOY)

        result.state = DeployState.UNPACKING
        self.hooks.run(HookPoint.BEFORE_EXTRACT)
        self.unpacker.unpack(
            target.cached_artifact_path,
            target.release_path,
            is_tarball=target.is_tarball,
            remove_top_level_directory=target.remove_top_level_directory,
        )
        self.hooks.run(HookPoint.AFTER_EXTRACT)

        result.state = DeployState.LINKING
        self.hooks.run(HookPoint.BEFORE_SYMLINK)
        self.links.materialize_links(target.release_path)
        self.hooks.run(HookPoint.AFTER_SYMLINK)

        if target.should_migrate:
            result.state = DeployState.HOOKS
            self.hooks.run(HookPoint.BEFORE_MIGRATE)
            self.hooks.run(HookPoint.MIGRATE)
            self.hooks.run(HookPoint.AFTER_MIGRATE)

    def _delete_current_if_forcing(self) -> None:
        """Delete the requested version's release before a forced reinstall

        Only when forcing with remove_on_force, and only if the version is
        the current one or a previous release.
        """
        target = self.target
        if not (target.force and target.remove_on_force):
            return

        version = target.version
        if version != self.store.current_version() and version not in self.store.list_previous_versions():
            return

        logger.info(f"{target.name}: {version} deleted because remove_on_force is true")
        self.store.delete_release_directory(version)

    def _release_is_empty(self) -> bool:
        release_path = self.target.release_path
        return release_path.is_dir() and not any(release_path.iterdir())

    def _new_result(self, action: str) -> DeployResult:
        return DeployResult(
            status=OperationStatus.IN_PROGRESS,
            action=action,
            name=self.target.name,
            version=self.target.version,
            release_path=self.target.release_path,
            cached_artifact=self.target.cached_artifact_path,
        )

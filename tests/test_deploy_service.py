"""Tests for the deploy and pre-seed workflows"""

import os

import pytest

from artifact_deploy.exceptions import ChecksumMismatchError, HookError, SourceNotFoundError
from artifact_deploy.models import DeployState, InstallDecision, OperationStatus
from artifact_deploy.services import DeploymentController


def run_deploy(target, **options):
    return DeploymentController(target, retry_delay=0, **options).deploy()


def current_version(target):
    return os.path.basename(os.readlink(target.current_path))


def age_release(target, mtime):
    os.utime(target.release_path, (mtime, mtime))


class Recorder:
    """Hook callables that record the order they ran in"""

    def __init__(self):
        self.calls = []

    def hooks(self, *names):
        return {name: self._hook(name) for name in names}

    def _hook(self, name):
        return lambda: self.calls.append(name)


class TestFreshDeploy:
    """First deployment of a target"""

    def test_release_is_installed_and_current(self, make_target, app_tarball):
        app_tarball("1.0.0")
        target = make_target(symlinks={"log": "log"})

        result = run_deploy(target)

        assert result.status == OperationStatus.SUCCESS
        assert result.deployed
        assert result.artifact_changed
        assert result.resolution.decision == InstallDecision.INSTALL
        assert result.state == DeployState.PRUNED
        assert (target.release_path / "VERSION").read_text() == "1.0.0"
        assert (target.release_path / "log").is_symlink()
        assert current_version(target) == "1.0.0"
        assert target.cached_artifact_path.is_file()
        for directory in ("system", "pids", "log"):
            assert (target.shared_path / directory).is_dir()

    def test_checksum_mismatch_is_rejected_on_every_run(self, make_target, app_tarball):
        app_tarball("1.0.0")
        target = make_target(artifact_checksum="0" * 64)

        with pytest.raises(ChecksumMismatchError):
            run_deploy(target)
        with pytest.raises(ChecksumMismatchError):
            run_deploy(target)

        assert not target.current_path.exists()
        assert not target.cached_artifact_path.exists()
        assert not any(target.release_path.iterdir())

    def test_missing_artifact_aborts(self, make_target):
        target = make_target()

        with pytest.raises(SourceNotFoundError):
            run_deploy(target)
        assert not target.current_path.exists()

    def test_hook_order(self, make_target, app_tarball):
        app_tarball("1.0.0")
        recorder = Recorder()
        hook_names = [
            "after_download", "before_deploy", "before_extract", "after_extract",
            "before_symlink", "after_symlink", "before_migrate", "migrate",
            "after_migrate", "configure", "restart", "after_deploy",
        ]
        target = make_target(should_migrate=True, hooks=recorder.hooks(*hook_names))

        result = run_deploy(target)

        assert recorder.calls == hook_names
        assert result.hooks_run == hook_names

    def test_migrate_hooks_need_should_migrate(self, make_target, app_tarball):
        app_tarball("1.0.0")
        recorder = Recorder()
        target = make_target(hooks=recorder.hooks("before_migrate", "migrate", "restart"))

        run_deploy(target)

        assert recorder.calls == ["restart"]

    def test_hook_failure_aborts_before_current_moves(self, make_target, app_tarball):
        app_tarball("1.0.0")

        def broken():
            raise RuntimeError("cannot link")

        target = make_target(hooks={"before_symlink": broken})

        with pytest.raises(HookError):
            run_deploy(target)
        assert not target.current_path.exists()

    def test_remove_top_level_directory(self, make_target, app_tarball):
        app_tarball("1.0.0", {"app-1.0.0/VERSION": b"1.0.0"})
        target = make_target(remove_top_level_directory=True)

        run_deploy(target)

        assert (target.release_path / "VERSION").read_text() == "1.0.0"

    def test_plain_file_artifact(self, make_target, artifacts):
        jar = artifacts / "service.jar"
        jar.write_bytes(b"jar bytes")
        target = make_target(artifact_location=jar, is_tarball=False)

        run_deploy(target)

        assert (target.release_path / "service.jar").read_bytes() == b"jar bytes"


class TestRedeploy:
    """Deploying onto an existing installation"""

    def test_same_version_is_idempotent(self, make_target, app_tarball):
        app_tarball("1.0.0")
        recorder = Recorder()
        target = make_target(hooks=recorder.hooks("configure", "restart"))
        run_deploy(target)
        recorder.calls.clear()

        result = run_deploy(target)

        assert result.status == OperationStatus.SKIPPED
        assert not result.deployed
        assert not result.artifact_changed
        assert result.resolution.decision == InstallDecision.ALREADY_CURRENT
        assert recorder.calls == ["configure"]
        assert current_version(target) == "1.0.0"

    def test_rebuilt_artifact_is_reinstalled(self, make_target, app_tarball):
        app_tarball("1.0.0")
        target = make_target()
        run_deploy(target)

        app_tarball("1.0.0", {"VERSION": b"1.0.0-rebuilt"})
        result = run_deploy(target)

        assert result.deployed
        assert result.artifact_changed
        assert (target.release_path / "VERSION").read_text() == "1.0.0-rebuilt"

    def test_force_reinstalls_current(self, make_target, app_tarball):
        app_tarball("1.0.0")
        recorder = Recorder()
        run_deploy(make_target())

        result = run_deploy(make_target(force=True, hooks=recorder.hooks("restart")))

        assert result.deployed
        assert result.resolution.decision == InstallDecision.FORCE_INSTALL
        assert recorder.calls == ["restart"]

    def test_remove_on_force_starts_from_a_clean_release(self, make_target, app_tarball):
        app_tarball("1.0.0")
        target = make_target()
        run_deploy(target)
        (target.release_path / "stray.txt").write_text("left behind")

        run_deploy(make_target(force=True, remove_on_force=True))

        assert not (target.release_path / "stray.txt").exists()
        assert (target.release_path / "VERSION").read_text() == "1.0.0"
        assert current_version(target) == "1.0.0"

    def test_new_version_keeps_previous_release(self, make_target, app_tarball):
        app_tarball("1.0.0")
        app_tarball("2.0.0")
        first = make_target("1.0.0")
        run_deploy(first)

        result = run_deploy(make_target("2.0.0"))

        assert result.deployed
        assert current_version(first) == "2.0.0"
        assert first.release_path.is_dir()

    def test_previous_version_is_rolled_back(self, make_target, app_tarball):
        app_tarball("1.0.0")
        app_tarball("2.0.0")
        recorder = Recorder()
        run_deploy(make_target("1.0.0"))
        run_deploy(make_target("2.0.0"))

        target = make_target("1.0.0", hooks=recorder.hooks("restart"))
        result = run_deploy(target)

        assert not result.deployed
        assert result.resolution.is_rollback
        assert result.warnings
        assert recorder.calls == []
        assert current_version(target) == "1.0.0"

    def test_old_releases_are_pruned(self, make_target, app_tarball):
        for mtime, version in enumerate(["1.0.0", "2.0.0", "3.0.0", "4.0.0"], start=1):
            app_tarball(version)
            target = make_target(version, keep=2)
            result = run_deploy(target)
            age_release(target, mtime * 1000)

        assert result.pruned_versions == ["1.0.0"]
        assert not make_target("1.0.0").release_path.exists()
        assert not make_target("1.0.0").artifact_cache_version_path.exists()
        controller = DeploymentController(make_target("4.0.0"))
        assert [r.version for r in controller.status().previous_releases] == ["2.0.0", "3.0.0"]


class TestPreSeed:
    """Staging an artifact ahead of a deploy"""

    def test_pre_seed_stages_without_installing(self, make_target, app_tarball):
        app_tarball("1.0.0")
        recorder = Recorder()
        target = make_target(hooks=recorder.hooks("after_download", "restart"))

        result = DeploymentController(target).pre_seed()

        assert result.action == "pre_seed"
        assert result.artifact_changed
        assert target.cached_artifact_path.is_file()
        assert target.release_path.is_dir()
        assert not target.current_path.exists()
        assert recorder.calls == ["after_download"]

    def test_deploy_after_pre_seed_fills_empty_release(self, make_target, app_tarball):
        app_tarball("1.0.0")
        app_tarball("2.0.0")
        run_deploy(make_target("1.0.0"))
        DeploymentController(make_target("2.0.0")).pre_seed()

        target = make_target("2.0.0")
        result = run_deploy(target)

        assert result.deployed
        assert not result.artifact_changed
        assert (target.release_path / "VERSION").read_text() == "2.0.0"
        assert current_version(target) == "2.0.0"

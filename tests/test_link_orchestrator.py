"""Tests for shared links and the current pointer"""

import errno
import os

import pytest
import yaml

from artifact_deploy.core import LinkOrchestrator, ReleaseStore
from artifact_deploy.exceptions import FilesystemError


@pytest.fixture
def target(make_target):
    return make_target(
        symlinks={"log": "log", "uploads": "public/uploads"},
        shared_directories=["pids", "system"],
    )


@pytest.fixture
def release(target):
    target.release_path.mkdir(parents=True)
    return target.release_path


def test_materialize_links(target, release):
    created = LinkOrchestrator(target).materialize_links(release)

    assert (release / "log").is_symlink()
    assert os.readlink(release / "log") == str(target.shared_path / "log")
    assert (release / "public" / "uploads").is_symlink()
    assert (target.shared_path / "uploads").is_dir()
    assert (target.shared_path / "pids").is_dir()
    assert (target.shared_path / "system").is_dir()
    assert created[str(release / "log")] == str(target.shared_path / "log")


def test_materialize_links_replaces_directory_from_artifact(target, release):
    (release / "log").mkdir()
    (release / "log" / "bundled.log").write_text("from artifact")

    LinkOrchestrator(target).materialize_links(release)

    assert (release / "log").is_symlink()


def test_materialize_links_replaces_file(target, release):
    (release / "log").write_text("a file in the way")

    LinkOrchestrator(target).materialize_links(release)

    assert (release / "log").is_symlink()


def test_materialize_links_is_idempotent(target, release):
    links = LinkOrchestrator(target)
    (target.shared_path / "log").mkdir(parents=True)
    (target.shared_path / "log" / "app.log").write_text("keep me")

    links.materialize_links(release)
    links.materialize_links(release)

    assert (release / "log" / "app.log").read_text() == "keep me"


def test_promote_current(target, release):
    links = LinkOrchestrator(target)

    links.promote_current(release)

    assert target.current_path.is_symlink()
    assert ReleaseStore(target).current_version() == target.version


def test_promote_current_swaps_existing_link(make_target, target, release):
    links = LinkOrchestrator(target)
    links.promote_current(release)
    other = make_target("2.0.0").release_path
    other.mkdir(parents=True)

    links.promote_current(other)

    assert os.readlink(target.current_path) == str(other)
    assert not (target.deploy_to / ".current.tmp").exists()


def test_promote_current_falls_back_to_metadata(target, release, monkeypatch):
    def no_symlinks(link, target_path):
        raise OSError(errno.EPERM, "Operation not permitted")

    monkeypatch.setattr(
        "artifact_deploy.core.link_orchestrator.replace_symlink", no_symlinks
    )

    metadata_file = LinkOrchestrator(target).promote_current(release)

    assert yaml.safe_load(metadata_file.read_text()) == {"current": target.version}
    assert target.current_path.is_dir()
    assert ReleaseStore(target).current_version() == target.version


def test_promote_current_other_errors_are_fatal(target, release, monkeypatch):
    def broken(link, target_path):
        raise OSError(errno.EIO, "I/O error")

    monkeypatch.setattr(
        "artifact_deploy.core.link_orchestrator.replace_symlink", broken
    )

    with pytest.raises(FilesystemError):
        LinkOrchestrator(target).promote_current(release)

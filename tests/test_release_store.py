"""Tests for the release store"""

import os

import pytest
import yaml

from artifact_deploy.core import ReleaseStore
from artifact_deploy.exceptions import MetadataError, ReleaseInUseError


def _add_release(store, version, mtime):
    path = store.release_path(version)
    path.mkdir(parents=True)
    (path / "VERSION").write_text(version)
    os.utime(path, (mtime, mtime))
    return path


def _point_current(target, version):
    target.current_path.symlink_to(target.releases_path / version)


@pytest.fixture
def store(make_target):
    return ReleaseStore(make_target("3.0.0"))


def test_no_current_on_fresh_target(store):
    assert store.current_version() is None
    assert store.list_releases() == []
    assert store.list_cached_versions() == []


def test_current_from_symlink(store):
    _add_release(store, "1.0.0", 1000)
    _point_current(store.target, "1.0.0")

    assert store.current_version() == "1.0.0"


def test_dangling_current_is_ignored(store):
    store.target.deploy_to.mkdir(parents=True)
    _point_current(store.target, "gone")

    assert store.current_version() is None


def test_current_from_metadata_file(store):
    store.target.current_path.mkdir(parents=True)
    store.target.symlinks_metadata_path.write_text(yaml.safe_dump({"current": "1.0.0"}))

    assert store.current_version() == "1.0.0"


def test_missing_metadata_file_is_an_error(store):
    store.target.current_path.mkdir(parents=True)

    with pytest.raises(MetadataError):
        store.current_version()


def test_metadata_without_current_key_is_an_error(store):
    store.target.current_path.mkdir(parents=True)
    store.target.symlinks_metadata_path.write_text("other: value\n")

    with pytest.raises(MetadataError):
        store.current_version()


def test_previous_releases_sorted_by_mtime(store):
    _add_release(store, "1.0.0", 3000)
    _add_release(store, "2.0.0", 1000)
    _add_release(store, "3.0.0", 2000)
    _point_current(store.target, "3.0.0")

    assert store.list_previous_versions() == ["2.0.0", "1.0.0"]
    assert [r.version for r in store.list_releases()] == ["2.0.0", "3.0.0", "1.0.0"]


def test_files_in_releases_are_not_releases(store):
    _add_release(store, "1.0.0", 1000)
    (store.target.releases_path / "notes.txt").write_text("not a release")

    assert [r.version for r in store.list_releases()] == ["1.0.0"]


def test_create_release_skeleton_is_idempotent(store):
    first = store.create_release_skeleton()
    second = store.create_release_skeleton()

    assert first == second
    assert all(path.is_dir() for path in first)
    assert store.target.release_path.is_dir()
    assert store.target.artifact_cache_version_path.is_dir()
    assert store.target.shared_path.is_dir()
    assert store.list_cached_versions() == ["3.0.0"]


def test_delete_release_removes_cache_too(store):
    store.create_release_skeleton("1.0.0")
    _point_current(store.target, "3.0.0")
    store.release_path("3.0.0").mkdir(parents=True)

    store.delete_release("1.0.0")

    assert not store.release_path("1.0.0").exists()
    assert not store.cache_version_path("1.0.0").exists()


def test_current_release_cannot_be_deleted(store):
    _add_release(store, "1.0.0", 1000)
    _point_current(store.target, "1.0.0")

    with pytest.raises(ReleaseInUseError):
        store.delete_release("1.0.0")
    assert store.release_path("1.0.0").is_dir()


def test_delete_release_directory_keeps_cache(store):
    store.create_release_skeleton()

    assert store.delete_release_directory("3.0.0")
    assert not store.target.release_path.exists()
    assert store.target.artifact_cache_version_path.is_dir()
    assert not store.delete_release_directory("3.0.0")

"""Tests for file and retry utilities"""

import os

import pytest

from artifact_deploy.exceptions import FilesystemError
from artifact_deploy.utils import (
    copy_path,
    filesystem_errors,
    files_identical,
    remove_path,
    replace_symlink,
    retry_call,
)


def test_files_identical(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"same")
    b.write_bytes(b"same")

    assert files_identical(a, b)
    b.write_bytes(b"diff")
    assert not files_identical(a, b)
    assert not files_identical(a, tmp_path / "missing")
    assert not files_identical(a, tmp_path)


def test_copy_path_into_directory(tmp_path):
    src = tmp_path / "artifact.jar"
    src.write_bytes(b"jar")
    dst = tmp_path / "release"
    dst.mkdir()

    copy_path(src, dst)

    assert (dst / "artifact.jar").read_bytes() == b"jar"


def test_replace_symlink_over_directory(tmp_path):
    target = tmp_path / "target"
    target.mkdir()
    link = tmp_path / "link"
    link.mkdir()

    replace_symlink(link, target)

    assert link.is_symlink()
    assert os.readlink(link) == str(target)


def test_remove_path(tmp_path):
    tree = tmp_path / "tree"
    (tree / "sub").mkdir(parents=True)

    assert remove_path(tree)
    assert not remove_path(tree)


def test_filesystem_errors_translates_os_errors(tmp_path):
    with pytest.raises(FilesystemError) as exc_info:
        with filesystem_errors("reading a file"):
            (tmp_path / "missing").read_text()

    assert "reading a file" in str(exc_info.value)
    assert exc_info.value.error_code == "AD005"


def test_retry_call_retries_then_succeeds():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise OSError("busy")
        return "done"

    assert retry_call(flaky, retries=2, delay=0) == "done"
    assert len(attempts) == 3


def test_retry_call_reraises_last_error():
    def always_fails():
        raise OSError("broken")

    with pytest.raises(OSError, match="broken"):
        retry_call(always_fails, retries=1, delay=0)


def test_retry_call_does_not_retry_other_exceptions():
    attempts = []

    def wrong_type():
        attempts.append(1)
        raise ValueError("not retryable")

    with pytest.raises(ValueError):
        retry_call(wrong_type, retries=3, delay=0, exceptions=(OSError,))
    assert len(attempts) == 1


def test_retry_call_does_not_retry_permission_errors():
    attempts = []

    def denied():
        attempts.append(1)
        raise PermissionError("denied")

    with pytest.raises(PermissionError):
        retry_call(denied, retries=3, delay=0, exceptions=(OSError,))
    assert len(attempts) == 1

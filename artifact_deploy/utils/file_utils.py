# artifact_deploy/utils/file_utils.py
"""File operation utilities"""

import filecmp
import hashlib
import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..constants import DEFAULT_CHUNK_SIZE
from ..exceptions import FilesystemError

logger = logging.getLogger(__name__)


@contextmanager
def filesystem_errors(action: str) -> Iterator[None]:
    """Translate OS-level failures into a fatal FilesystemError

    Args:
        action: Human readable description of what was being done
    """
    try:
        yield
    except PermissionError as e:
        raise FilesystemError(f"Permission denied while {action}: {e}") from e
    except OSError as e:
        raise FilesystemError(f"Filesystem error while {action}: {e}") from e


def calculate_file_checksum(file_path: Path,
                            algorithm: str = "sha256",
                            chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Calculate file checksum

    Args:
        file_path: Path to file
        algorithm: Hash algorithm (sha256, md5, sha1)
        chunk_size: Read chunk size

    Returns:
        Hex digest string
    """
    hash_func = hashlib.new(algorithm)

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hash_func.update(chunk)

    return hash_func.hexdigest()


def files_identical(first: Path, second: Path) -> bool:
    """
    Byte-for-byte comparison of two paths

    Directories compare equal when their file trees match. A missing path is
    never identical to anything.
    """
    if not first.exists() or not second.exists():
        return False

    if first.is_dir() or second.is_dir():
        if not (first.is_dir() and second.is_dir()):
            return False
        return _trees_identical(first, second)

    return filecmp.cmp(first, second, shallow=False)


def _trees_identical(first: Path, second: Path) -> bool:
    comparison = filecmp.dircmp(first, second)
    if comparison.left_only or comparison.right_only or comparison.funny_files:
        return False

    _, mismatch, errors = filecmp.cmpfiles(
        first, second, comparison.common_files, shallow=False
    )
    if mismatch or errors:
        return False

    return all(
        _trees_identical(first / name, second / name)
        for name in comparison.common_dirs
    )


def apply_ownership(path: Path,
                    owner: Optional[str] = None,
                    group: Optional[str] = None,
                    mode: Optional[int] = None) -> None:
    """
    Apply owner, group and mode to a path (symlinks are left untouched)

    Args:
        path: Path to update
        owner: User name (None keeps the current owner)
        group: Group name (None keeps the current group)
        mode: Permission bits
    """
    if path.is_symlink():
        if owner or group:
            os.lchown(path,
                      _uid(owner) if owner else -1,
                      _gid(group) if group else -1)
        return

    if owner or group:
        shutil.chown(path, user=owner, group=group)
    if mode is not None:
        path.chmod(mode)


def _uid(owner: str) -> int:
    import pwd
    return pwd.getpwnam(owner).pw_uid


def _gid(group: str) -> int:
    import grp
    return grp.getgrnam(group).gr_gid


def ensure_directory(path: Path,
                     owner: Optional[str] = None,
                     group: Optional[str] = None,
                     mode: Optional[int] = 0o755) -> Path:
    """
    Create a directory and its parents, tolerating an existing one

    Args:
        path: Directory to create
        owner: Directory owner
        group: Directory group
        mode: Permission bits

    Returns:
        The directory path
    """
    with filesystem_errors(f"creating directory {path}"):
        path.mkdir(parents=True, exist_ok=True)
        apply_ownership(path, owner, group, mode)
    return path


def remove_path(path: Path) -> bool:
    """
    Remove a file, symlink or directory tree

    Args:
        path: Path to remove

    Returns:
        True if something was removed
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def copy_path(src: Path, dst: Path) -> None:
    """
    Recursive copy, in the manner of `cp -R src dst`

    A directory destination receives the source inside it.

    Args:
        src: Source file or directory
        dst: Destination path
    """
    if dst.is_dir():
        dst = dst / src.name

    if src.is_dir():
        shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
    else:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)


def replace_symlink(link: Path, target: Path) -> Path:
    """
    Create or atomically replace a symbolic link

    The new link is created beside the old one and renamed over it, so the
    link is never missing. A real directory in the link's place is removed
    first since rename cannot replace it.

    Args:
        link: Link path
        target: Link target

    Returns:
        Path to the link
    """
    temp_link = link.with_name(f".{link.name}.tmp")

    if temp_link.exists() or temp_link.is_symlink():
        temp_link.unlink()

    temp_link.symlink_to(target, target_is_directory=target.is_dir())

    if link.is_dir() and not link.is_symlink():
        shutil.rmtree(link)

    os.replace(temp_link, link)
    return link

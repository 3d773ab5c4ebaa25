# artifact_deploy/utils/__init__.py
"""Utility functions for artifact-deploy"""

from .file_utils import (
    filesystem_errors,
    calculate_file_checksum,
    files_identical,
    apply_ownership,
    ensure_directory,
    remove_path,
    copy_path,
    replace_symlink,
)

from .retry import retry_call

__all__ = [
    # File utilities
    "filesystem_errors",
    "calculate_file_checksum",
    "files_identical",
    "apply_ownership",
    "ensure_directory",
    "remove_path",
    "copy_path",
    "replace_symlink",

    # Retry utilities
    "retry_call",
]

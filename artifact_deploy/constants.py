"""Global constants for artifact-deploy"""

import re
from enum import Enum

APP_NAME = "artifact-deploy"
LOG_FORMAT = "%(message)s"

# Deployment layout
RELEASES_DIR = "releases"
SHARED_DIR = "shared"
CURRENT_LINK_NAME = "current"
SYMLINKS_METADATA_FILE = ".symlinks"
CACHE_DEPLOYS_DIR = "artifact_deploys"
DEFAULT_CACHE_DIR = "~/.artifact-deploy-cache"

# Default target configuration values
DEFAULT_KEEP = 2
DEFAULT_SHARED_DIRECTORIES = ("system", "pids", "log")
DEFAULT_DIR_MODE = 0o755

# Extraction and copy retries (additional attempts after the first)
DEFAULT_RETRY_COUNT = 2
DEFAULT_RETRY_DELAY = 1  # seconds

# Hook command execution
DEFAULT_HOOK_TIMEOUT = 300  # seconds
HOOK_ENV_PREFIX = "ARTIFACT_DEPLOY_"

DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB


# Archive formats, matched by case-sensitive filename suffix
class ArchiveFormat(Enum):
    TAR = "tar"
    TAR_GZ = "tar.gz"
    TAR_BZ2 = "tar.bz2"
    TAR_XZ = "tar.xz"
    ZIP = "zip"


ARCHIVE_SUFFIXES = [
    (".tar.gz", ArchiveFormat.TAR_GZ),
    (".tgz", ArchiveFormat.TAR_GZ),
    (".tar.bz2", ArchiveFormat.TAR_BZ2),
    (".tbz2", ArchiveFormat.TAR_BZ2),
    (".tbz", ArchiveFormat.TAR_BZ2),
    (".tar.xz", ArchiveFormat.TAR_XZ),
    (".tar", ArchiveFormat.TAR),
    (".zip", ArchiveFormat.ZIP),
    (".war", ArchiveFormat.ZIP),
    (".jar", ArchiveFormat.ZIP),
]

TARFILE_MODES = {
    ArchiveFormat.TAR: "r:",
    ArchiveFormat.TAR_GZ: "r:gz",
    ArchiveFormat.TAR_BZ2: "r:bz2",
    ArchiveFormat.TAR_XZ: "r:xz",
}

SUPPORTED_EXTENSIONS = "tar, tgz, tar.gz, tbz, tbz2, tar.bz2, tar.xz, zip, war, jar"


# Lifecycle hook names, in the order a full deploy runs them
class HookPoint(Enum):
    AFTER_DOWNLOAD = "after_download"
    BEFORE_DEPLOY = "before_deploy"
    BEFORE_EXTRACT = "before_extract"
    AFTER_EXTRACT = "after_extract"
    BEFORE_SYMLINK = "before_symlink"
    AFTER_SYMLINK = "after_symlink"
    BEFORE_MIGRATE = "before_migrate"
    MIGRATE = "migrate"
    AFTER_MIGRATE = "after_migrate"
    CONFIGURE = "configure"
    RESTART = "restart"
    AFTER_DEPLOY = "after_deploy"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "AD001"
    SOURCE_NOT_FOUND = "AD002"
    UNSUPPORTED_FORMAT = "AD003"
    EXTRACTION_FAILED = "AD004"
    FILESYSTEM_ERROR = "AD005"
    METADATA_MISSING = "AD006"
    CHECKSUM_MISMATCH = "AD007"
    HOOK_FAILED = "AD008"
    RELEASE_IN_USE = "AD009"


# Environment variables
ENV_CACHE_DIR = "ARTIFACT_DEPLOY_CACHE"
ENV_LOG_LEVEL = "ARTIFACT_DEPLOY_LOG_LEVEL"

# Validation patterns
WHITESPACE_PATTERN = re.compile(r"\s")
USER_VALID_PATTERN = re.compile(r"^[^\s:/\\]+$")
REMOTE_LOCATION_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ARROW = "→"
EMOJI_LINK = "🔗"

# Messages templates
MSG_DEPLOY_SUCCESS = f"{EMOJI_SUCCESS} Deployed: {{name}}:{{version}}"
MSG_DEPLOY_SKIPPED = f"{EMOJI_SUCCESS} Already deployed: {{name}}:{{version}}"
MSG_PRE_SEED_SUCCESS = f"{EMOJI_SUCCESS} Pre-seeded: {{name}}:{{version}}"
MSG_LINK_UPDATED = f"{EMOJI_LINK} Link updated: {{link}} {EMOJI_ARROW} {{target}}"

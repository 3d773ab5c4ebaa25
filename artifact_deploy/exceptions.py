"""Exception definitions for artifact-deploy"""

from .constants import ErrorCode


class ArtifactDeployError(Exception):
    """Base exception for artifact-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(ArtifactDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class SourceNotFoundError(ArtifactDeployError):
    """Artifact source location does not exist"""

    def __init__(self, location: str):
        message = (
            f"Cannot retrieve artifact {location}! "
            "Please make sure the artifact exists in the specified location."
        )
        super().__init__(message, ErrorCode.SOURCE_NOT_FOUND)
        self.location = location


class UnsupportedFormatError(ArtifactDeployError):
    """Artifact extension is not a known archive format"""

    def __init__(self, artifact_path: str, supported: str):
        message = (
            f"Cannot extract artifact {artifact_path} because of its extension. "
            f"Supported types are [{supported}]."
        )
        super().__init__(message, ErrorCode.UNSUPPORTED_FORMAT)
        self.artifact_path = artifact_path


class ExtractionError(ArtifactDeployError):
    """Extraction or copy failed after all retries"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.EXTRACTION_FAILED)


class FilesystemError(ArtifactDeployError):
    """Permission or integrity error on the deployment hierarchy"""

    def __init__(self, message: str, error_code: str = ErrorCode.FILESYSTEM_ERROR):
        super().__init__(message, error_code)


class ReleaseInUseError(FilesystemError):
    """Attempt to delete the release the current pointer names"""

    def __init__(self, version: str):
        message = f"Refusing to delete release {version}: it is the current release"
        super().__init__(message, ErrorCode.RELEASE_IN_USE)
        self.version = version


class MetadataError(ArtifactDeployError):
    """Fallback metadata file is missing or unreadable"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.METADATA_MISSING)


class ChecksumMismatchError(ArtifactDeployError):
    """Cached artifact does not match the configured checksum"""

    def __init__(self, path: str, expected: str, actual: str):
        message = f"Checksum mismatch for {path}: expected {expected}, got {actual}"
        super().__init__(message, ErrorCode.CHECKSUM_MISMATCH)
        self.path = path
        self.expected = expected
        self.actual = actual


class HookError(ArtifactDeployError):
    """A lifecycle hook raised"""

    def __init__(self, hook_name: str, cause: Exception):
        message = f"Hook '{hook_name}' failed: {cause}"
        super().__init__(message, ErrorCode.HOOK_FAILED)
        self.hook_name = hook_name
        self.cause = cause

"""Error taxonomy for the launcher."""

from pathlib import Path
from typing import List, Optional, Union


class LauncherError(Exception):
    """Base class for every error that aborts a launch."""

    exit_code = 1


class VersionNotFoundError(LauncherError):
    def __init__(self, version_id: str):
        self.version_id = version_id
        super().__init__(f"Version {version_id} not found in the version index")


class FetchError(LauncherError):
    def __init__(self, url: str, cause: Optional[Union[BaseException, str]] = None):
        self.url = url
        self.cause = cause
        message = f"Failed to fetch {url}"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class DescriptorParseError(LauncherError):
    def __init__(self, source: str, cause: Optional[Union[BaseException, str]] = None):
        self.source = source
        self.cause = cause
        super().__init__(f"Malformed document {source}: {cause}")


class AssetFetchError(LauncherError):
    """One or more asset objects could not be downloaded.

    Objects written before the failure stay on disk, so running the launcher
    again resumes where this run stopped.
    """

    def __init__(self, failures: List[FetchError]):
        self.failures = failures
        first = failures[0].url if failures else "unknown"
        super().__init__(f"{len(failures)} asset object(s) failed to download (first: {first})")


class NativeExtractionError(LauncherError):
    """Raised while unpacking a native bundle. Never aborts a launch."""

    def __init__(self, bundle: Path, cause: Optional[BaseException] = None):
        self.bundle = bundle
        self.cause = cause
        super().__init__(f"Could not extract natives from {bundle}: {cause}")


class InvalidUsernameError(LauncherError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Invalid username for offline mode: {username!r}")


class JavaNotFoundError(LauncherError):
    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"Java executable not found: {executable}")

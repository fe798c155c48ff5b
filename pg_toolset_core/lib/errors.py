"""
Exceptions raised while locating and running the Postgres client programs.
"""

from typing import Dict, List, Optional, Sequence
import os


class ToolsetError(RuntimeError):
    """Base class for toolset discovery and invocation failures."""


class NotFoundError(ToolsetError):
    """No candidate executable could be located."""


class AmbiguousConfigurationError(ToolsetError):
    """Several installations qualify and nothing says which one to use."""

    def __init__(self, message: str, candidates: Sequence[str], versions: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.candidates: List[str] = list(candidates)
        self.versions: Dict[str, str] = dict(versions or {})


class VersionParseError(ToolsetError):
    """Program output did not contain a recognizable version number."""


class MalformedOutputError(ToolsetError):
    """Program output did not have the expected shape."""


class LaunchError(ToolsetError):
    """The operating system refused to start a program."""

    def __init__(self, path: str, errno: Optional[int]):
        reason = os.strerror(errno) if errno else "unknown error"
        super().__init__(f'Failed to run "{path}": {reason}')
        self.path = path
        self.errno = errno


class NonZeroExitError(ToolsetError):
    """A program ran and reported failure."""

    def __init__(self, path: str, return_code: int, stderr: str = ""):
        super().__init__(f'Program "{path}" exited with code {return_code}')
        self.path = path
        self.return_code = return_code
        self.stderr = stderr


class SymlinkResolutionError(ToolsetError):
    """Following a symbolic link in PATH failed."""

    def __init__(self, path: str, errno: Optional[int], reason: str = ""):
        super().__init__(f'Failed to resolve symbolic link "{path}": {reason or os.strerror(errno or 0)}')
        self.path = path
        self.errno = errno

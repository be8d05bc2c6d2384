"""Errors raised by the lockable-file coordination layer."""

from typing import Any, Mapping


class LockingError(Exception):
    """Base exception for lockable-file handling."""

    context: dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = dict(context) if context is not None else {}


class DirectoryNotFoundError(LockingError, FileNotFoundError):
    """Raised when a repair pass is pointed at a directory that does not exist."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LockingError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class InvalidDirectoryError(LockingError, NotADirectoryError):
    """Raised when a repair pass root exists but is not a directory."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LockingError.__init__(self, message, context=context)
        NotADirectoryError.__init__(self, message)


class LockingIOError(LockingError, OSError):
    """Raised when listing, stat or chmod fails during a repair pass."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LockingError.__init__(self, message, context=context)
        OSError.__init__(self, message)


class PathResolutionError(LockingError, ValueError):
    """Raised when a path cannot be expressed relative to the repository root."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LockingError.__init__(self, message, context=context)
        ValueError.__init__(self, message)

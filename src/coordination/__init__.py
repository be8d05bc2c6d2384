"""Coordination layer - lockable patterns, lock state and write flags."""

from .attributes import AttributePath, GitAttributesSource
from .exceptions import (
    DirectoryNotFoundError,
    InvalidDirectoryError,
    LockingError,
    LockingIOError,
    PathResolutionError,
)
from .file_locks import LockResult, RedisLockStore
from .patterns import GlobMatcher, LockablePatternCache, compile_glob
from .service import LockableFileService, SyncResult
from .walker import FileVisit, iter_file_visits
from .write_flags import set_file_write_flag

__all__ = [
    "AttributePath",
    "DirectoryNotFoundError",
    "FileVisit",
    "GitAttributesSource",
    "GlobMatcher",
    "InvalidDirectoryError",
    "LockResult",
    "LockableFileService",
    "LockablePatternCache",
    "LockingError",
    "LockingIOError",
    "PathResolutionError",
    "RedisLockStore",
    "SyncResult",
    "compile_glob",
    "iter_file_visits",
    "set_file_write_flag",
]

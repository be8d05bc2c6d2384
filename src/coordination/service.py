"""Lockable file service - keeps write flags in line with lock state."""

import os
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Protocol

import structlog

from .exceptions import (
    DirectoryNotFoundError,
    InvalidDirectoryError,
    LockingIOError,
)
from .file_locks import LockResult
from .patterns import LockablePatternCache
from .walker import canonical_path, iter_file_visits
from .write_flags import set_file_write_flag

logger = structlog.get_logger()


class LockStore(Protocol):
    """Lock-state collaborator."""
    
    def is_locked_by_current_committer(self, path: str) -> bool:
        ...
    
    def lock_file(self, path: str) -> LockResult:
        ...
    
    def unlock_file(self, path: str) -> bool:
        ...


@dataclass
class SyncResult:
    """Summary of a repair pass."""
    visited: int = 0
    lockable: int = 0
    changed: int = 0


class LockableFileService:
    """Answers lockability questions and repairs write flags for a repo.
    
    Files that are locked by the current committer are made writable, every
    other lockable file is made read-only. Run a repair pass after clone or
    checkout so the working tree reflects the current lock state.
    """
    
    def __init__(
        self,
        repo_root: Path,
        patterns: LockablePatternCache,
        locks: LockStore,
        set_write_flag: Callable[[str, bool], bool] | None = None,
    ):
        self.repo_root = Path(repo_root)
        self.patterns = patterns
        self.locks = locks
        self.set_write_flag = set_write_flag or partial(
            set_file_write_flag, repo_root=self.repo_root
        )
    
    def get_lockable_patterns(self) -> tuple[str, ...]:
        """Patterns from attribute files that carry the lockable attribute."""
        return self.patterns.get_patterns()
    
    def refresh_lockable_patterns(self) -> None:
        """Forget cached patterns so attribute changes are picked up."""
        self.patterns.invalidate()
    
    def is_file_lockable(self, path: str) -> bool:
        """Whether a repo-relative path is lockable."""
        return self.patterns.is_lockable(path)
    
    def fix_all_lockable_file_write_flags(self) -> SyncResult:
        """Repair write flags across the whole working tree."""
        return self.fix_lockable_file_write_flags_in_dir("", recursive=True)
    
    def fix_lockable_file_write_flags_in_dir(self, dir: str | Path, recursive: bool) -> SyncResult:
        """Repair write flags for lockable files under ``dir``.
        
        ``dir`` is either relative to the repository root or an absolute path
        inside it. Without ``recursive`` only files directly inside ``dir``
        are touched. The first failure stops the pass; files fixed before it
        keep their new permissions.
        """
        root = Path(dir)
        if not root.is_absolute():
            root = self.repo_root / root
        root = Path(os.path.normpath(root))
        
        try:
            is_dir = root.is_dir()
            exists = is_dir or root.exists()
        except OSError as e:
            raise LockingIOError(f"Cannot stat {root}: {e}", context={"path": str(root)}) from e
        if not exists:
            raise DirectoryNotFoundError(
                f"{str(dir)!r} does not exist", context={"path": str(root)}
            )
        if not is_dir:
            raise InvalidDirectoryError(
                f"{str(dir)!r} is not a valid directory", context={"path": str(root)}
            )
        
        # Fails early for absolute paths outside the repository
        canonical_path(root, self.repo_root)
        
        result = SyncResult()
        for visit in iter_file_visits(root, self.repo_root, recursive=recursive):
            result.visited += 1
            if not self.is_file_lockable(visit.rel_path):
                continue
            
            result.lockable += 1
            locked = self.locks.is_locked_by_current_committer(visit.rel_path)
            if self.set_write_flag(visit.rel_path, locked):
                result.changed += 1
        
        logger.info(
            "Fixed lockable file write flags",
            dir=str(dir),
            recursive=recursive,
            visited=result.visited,
            lockable=result.lockable,
            changed=result.changed,
        )
        return result
    
    def lock(self, path: str) -> LockResult:
        """Lock a file and make it writable."""
        result = self.locks.lock_file(path)
        if result.acquired:
            self.set_write_flag(path, True)
        else:
            logger.warning("File is locked by someone else", path=path, holder=result.holder)
        return result
    
    def unlock(self, path: str) -> bool:
        """Release a lock and, for lockable files, make the file read-only."""
        released = self.locks.unlock_file(path)
        if released and self.is_file_lockable(path):
            self.set_write_flag(path, False)
        return released

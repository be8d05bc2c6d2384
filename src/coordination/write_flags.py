"""File write flags - makes lockable files writable or read-only."""

import os
import stat
from pathlib import Path

import structlog

from .exceptions import LockingIOError

logger = structlog.get_logger()

OWNER_WRITE = stat.S_IWUSR
ALL_WRITE = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


def writable_mode(mode: int, writable: bool) -> int:
    """Permission bits after applying the write flag.
    
    Making a file writable only grants the owner bit; making it read-only
    clears every write bit.
    """
    if writable:
        return mode | OWNER_WRITE
    return mode & ~ALL_WRITE


def set_file_write_flag(path: str | Path, writable: bool, repo_root: Path | None = None) -> bool:
    """Set or clear a file's write permission.
    
    Relative paths are resolved against ``repo_root`` (or the current
    directory when it is not given). The mode is only written when it
    changes. Symlinks and other non-regular files are left alone since
    chmod would act on the link target. Returns True if the file's
    permissions were modified.
    """
    target = Path(path)
    if not target.is_absolute() and repo_root is not None:
        target = Path(repo_root) / target
    
    try:
        st = os.lstat(target)
        if not stat.S_ISREG(st.st_mode):
            logger.debug("Skipped non-regular file", path=str(path))
            return False
        current = stat.S_IMODE(st.st_mode)
        wanted = writable_mode(current, writable)
        if wanted == current:
            return False
        os.chmod(target, wanted)
    except OSError as e:
        raise LockingIOError(
            f"Cannot set write flag on {path}: {e}",
            context={"path": str(path), "writable": writable},
        ) from e
    
    logger.debug("Set file write flag", path=str(path), writable=writable)
    return True

"""Directory traversal - lazily yields files under a repository subtree."""

import os
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Iterator

from .exceptions import LockingIOError, PathResolutionError

GIT_DIR = ".git"


@dataclass(frozen=True)
class FileVisit:
    """A file or directory seen during traversal."""
    abs_path: Path
    rel_path: str  # repo-relative, forward slashes
    is_dir: bool = False


def canonical_path(abs_path: PurePath | str, repo_root: PurePath) -> str:
    """Express an absolute path relative to the repo root with forward slashes."""
    if not isinstance(abs_path, PurePath):
        abs_path = Path(abs_path)
    try:
        rel = abs_path.relative_to(repo_root)
    except ValueError as e:
        raise PathResolutionError(
            f"{abs_path} is not inside repository {repo_root}",
            context={"path": str(abs_path), "repo_root": str(repo_root)},
        ) from e
    posix = rel.as_posix()
    return "" if posix == "." else posix


def iter_file_visits(
    root: Path,
    repo_root: Path,
    recursive: bool = True,
) -> Iterator[FileVisit]:
    """Yield every file under ``root``.
    
    Uses an explicit stack rather than recursion. Subdirectories are only
    entered when ``recursive`` is set; otherwise they are skipped entirely.
    The .git directory is never entered and symlinks are skipped, so a pass
    never reaches files outside the tree through a link.
    
    Entry order within a directory is whatever the filesystem returns. Any
    listing or stat failure raises LockingIOError at the point of iteration.
    """
    pending = [Path(root)]
    
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            raise LockingIOError(
                f"Cannot list directory {current}: {e}",
                context={"path": str(current)},
            ) from e
        
        for entry in entries:
            if entry.name == GIT_DIR:
                continue
            abs_child = current / entry.name
            try:
                if entry.is_symlink():
                    continue
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                raise LockingIOError(
                    f"Cannot stat {abs_child}: {e}",
                    context={"path": str(abs_child)},
                ) from e
            
            if is_dir:
                if recursive:
                    pending.append(abs_child)
                continue
            
            yield FileVisit(abs_child, canonical_path(abs_child, repo_root))

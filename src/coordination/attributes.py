"""Attribute configuration - reads lockable rules from .gitattributes files."""

from dataclasses import dataclass
from pathlib import Path

import structlog

from .exceptions import LockingIOError
from .walker import iter_file_visits

logger = structlog.get_logger()

ATTRIBUTES_FILE = ".gitattributes"
LOCKABLE_ATTR = "lockable"


@dataclass(frozen=True)
class AttributePath:
    """One attribute rule: a path pattern and whether it is lockable."""
    path: str
    lockable: bool = False


def parse_attribute_lines(lines: list[str], prefix: str = "") -> list[AttributePath]:
    """Turn attribute file lines into AttributePath records.
    
    ``prefix`` is the directory of a nested attributes file, relative to the
    repository root, with a trailing slash.
    """
    paths = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        
        fields = line.split()
        pattern = fields[0]
        if pattern.startswith("[attr]"):
            continue
        
        paths.append(
            AttributePath(
                path=prefix + pattern.lstrip("/"),
                lockable=LOCKABLE_ATTR in fields[1:],
            )
        )
    return paths


class GitAttributesSource:
    """Lists attribute rules from a repository's attribute files.
    
    Order is .git/info/attributes, the root .gitattributes, then nested
    .gitattributes files in walk order.
    """
    
    def __init__(self, repo_root: Path):
        self.repo_root = Path(repo_root)
    
    def _read(self, path: Path) -> list[str]:
        try:
            return path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise LockingIOError(
                f"Cannot read attributes file {path}: {e}",
                context={"path": str(path)},
            ) from e
    
    def list_attribute_paths(self) -> list[AttributePath]:
        """Return every attribute rule, lockable or not."""
        paths: list[AttributePath] = []
        
        info = self.repo_root / ".git" / "info" / "attributes"
        if info.is_file():
            paths.extend(parse_attribute_lines(self._read(info)))
        
        # Shallower files first so the root .gitattributes precedes nested ones
        found = sorted(
            (
                visit
                for visit in iter_file_visits(self.repo_root, self.repo_root, recursive=True)
                if visit.abs_path.name == ATTRIBUTES_FILE
            ),
            key=lambda v: (v.rel_path.count("/"), v.rel_path),
        )
        for visit in found:
            parent = visit.rel_path.rpartition("/")[0]
            prefix = f"{parent}/" if parent else ""
            paths.extend(parse_attribute_lines(self._read(visit.abs_path), prefix))
        
        logger.debug(
            "Read attribute paths",
            repo_root=str(self.repo_root),
            count=len(paths),
        )
        return paths

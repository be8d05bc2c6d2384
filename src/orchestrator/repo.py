"""Repository discovery - working tree root and current committer."""

import subprocess
from pathlib import Path

import structlog

from src.coordination.exceptions import PathResolutionError

from .config import Settings

logger = structlog.get_logger()


def _git(args: list[str], cwd: Path | None = None) -> str | None:
    """Run a git command and return stripped stdout, or None if it fails."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("git command failed", args=args, error=str(e))
        return None
    return result.stdout.strip() or None


def resolve_repo_root(settings: Settings, cwd: Path | None = None) -> Path:
    """Absolute working tree root from settings or `git rev-parse`."""
    if settings.repo_root is not None:
        root = Path(settings.repo_root).expanduser().resolve()
    else:
        toplevel = _git(["rev-parse", "--show-toplevel"], cwd=cwd)
        if toplevel is None:
            raise PathResolutionError(
                "Not inside a git working tree and no repo_root configured",
                context={"cwd": str(cwd or Path.cwd())},
            )
        root = Path(toplevel).resolve()
    
    if not root.is_dir():
        raise PathResolutionError(
            f"Repository root {root} is not a directory",
            context={"repo_root": str(root)},
        )
    return root


def resolve_committer(settings: Settings, repo_root: Path | None = None) -> str:
    """Committer identity as ``Name <email>``."""
    name = settings.committer_name or _git(["config", "user.name"], cwd=repo_root) or ""
    email = settings.committer_email or _git(["config", "user.email"], cwd=repo_root) or ""
    return f"{name} <{email}>"

"""Command line entry point - repair write flags and inspect lockable files."""

import logging
import sys

import click
import structlog

from src.coordination import (
    GitAttributesSource,
    LockableFileService,
    LockablePatternCache,
    LockingError,
    RedisLockStore,
)

from .config import Settings
from .repo import resolve_committer, resolve_repo_root

logger = structlog.get_logger()

LOG_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def configure_logging(level: str) -> None:
    """Route structlog output to stderr at the configured level."""
    level_no = LOG_LEVELS.get(level.upper())
    if level_no is None:
        raise ValueError(
            f"Unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}"
        )
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        # Look up sys.stderr per logger so redirected streams are honoured
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
    )


def build_service(settings: Settings) -> LockableFileService:
    """Wire the service to the repository, attribute files and lock store."""
    repo_root = resolve_repo_root(settings)
    committer = resolve_committer(settings, repo_root)

    return LockableFileService(
        repo_root=repo_root,
        patterns=LockablePatternCache(GitAttributesSource(repo_root)),
        locks=RedisLockStore(settings, committer),
    )


@click.group()
@click.option("--log-level", help="Override LOCKABLE_LOG_LEVEL", type=str)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """Keep lockable files read-only unless you hold their lock.

    \b
    Examples:
        lockable patterns
        lockable check art/layers.psd
        lockable fix
        lockable fix assets --no-recursive
    """
    settings = Settings()
    try:
        configure_logging(log_level or settings.log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e

    try:
        ctx.obj = build_service(settings)
    except LockingError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command(name="patterns")
@click.pass_obj
def patterns_cmd(service: LockableFileService):
    """List patterns marked lockable in .gitattributes."""
    for pattern in service.get_lockable_patterns():
        click.echo(pattern)


@cli.command(name="check")
@click.argument("paths", nargs=-1, required=True)
@click.pass_obj
def check_cmd(service: LockableFileService, paths: tuple[str, ...]):
    """Report whether each repo-relative PATH is lockable."""
    for path in paths:
        status = "lockable" if service.is_file_lockable(path) else "not lockable"
        click.echo(f"{path}: {status}")


@cli.command(name="fix")
@click.argument("directory", required=False, default="")
@click.option(
    "--recursive/--no-recursive",
    default=True,
    help="Descend into subdirectories (default: recursive)",
)
@click.pass_obj
def fix_cmd(service: LockableFileService, directory: str, recursive: bool):
    """Make lockable files writable only when you hold their lock.

    DIRECTORY is relative to the repository root, or absolute inside it.
    Defaults to the whole working tree.
    """
    try:
        result = service.fix_lockable_file_write_flags_in_dir(directory, recursive)
    except LockingError as e:
        logger.error("Repair pass failed", error=str(e), **e.context)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"Checked {result.visited} files, {result.lockable} lockable, "
        f"{result.changed} updated"
    )


if __name__ == "__main__":
    cli()

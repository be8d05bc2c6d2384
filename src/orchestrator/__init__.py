"""Orchestrator - settings, repository discovery and the CLI."""

from .config import Settings

__all__ = [
    "Settings",
]

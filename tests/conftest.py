"""Shared fixtures for lockable file tests."""

import os
from pathlib import Path

import pytest

from src.coordination.attributes import AttributePath


class StaticAttributeSource:
    """Attribute source backed by a list that tests can swap out."""
    
    def __init__(self, paths: list[AttributePath]):
        self.paths = paths
        self.calls = 0
    
    def list_attribute_paths(self) -> list[AttributePath]:
        self.calls += 1
        return list(self.paths)


@pytest.fixture
def make_source():
    """Build an attribute source where every given pattern is lockable."""
    def _make(*patterns: str) -> StaticAttributeSource:
        return StaticAttributeSource([AttributePath(path=p, lockable=True) for p in patterns])
    return _make


@pytest.fixture
def make_tree(tmp_path):
    """Create writable files under a fresh repository root."""
    def _make(*rel_paths: str) -> Path:
        for rel in rel_paths:
            path = tmp_path.joinpath(*rel.split("/"))
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(rel)
            os.chmod(path, 0o644)
        return tmp_path
    return _make

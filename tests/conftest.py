"""Shared fixtures."""

import os
from pathlib import Path

import pytest

# Deeper than the interpreter's default recursion limit
DEEP = 1100


@pytest.fixture
def deep_tree():
    """Factory for a chain of nested directories, built and removed without recursion."""
    created: list[Path] = []

    def _make(root: Path, depth: int = DEEP, leaf_bytes: int = 10) -> Path:
        current = root
        current.mkdir(parents=True, exist_ok=True)
        for _ in range(depth):
            current = current / "d"
            current.mkdir()
            created.append(current)
        (current / "leaf.bin").write_bytes(b"x" * leaf_bytes)
        return current

    yield _make

    for directory in reversed(created):
        if directory.exists():
            for child in directory.iterdir():
                child.unlink()
            os.rmdir(directory)

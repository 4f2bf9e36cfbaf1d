"""
Shared test fixtures.
"""

from pathlib import Path
from typing import Callable, Iterable

import pytest


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """Run each test from inside an empty temporary project directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_files(project_dir: Path) -> Callable[[Iterable[str]], None]:
    """Create empty files (and their parent dirs) relative to the project dir."""

    def _make(paths: Iterable[str]) -> None:
        for rel in paths:
            path = project_dir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"")

    return _make

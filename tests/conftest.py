"""Shared fixtures: throwaway Flutter projects on disk."""
import textwrap
from pathlib import Path
from typing import Dict, Optional

import pytest

from dart_janitor.config import reset_config


class ProjectBuilder:
    """Writes a minimal Flutter project layout under a temp directory."""

    def __init__(self, root: Path):
        self.root = root

    def source(self, relative_path: str, code: str) -> Path:
        """Write a Dart file under lib/."""
        return self.file(f"lib/{relative_path}", textwrap.dedent(code).lstrip("\n"))

    def pubspec(self, content: str) -> Path:
        return self.file("pubspec.yaml", textwrap.dedent(content).lstrip("\n"))

    def file(self, relative_path: str, content: str = "") -> Path:
        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def asset(self, relative_path: str) -> Path:
        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x89PNG")
        return path

    def build(self, sources: Dict[str, str], pubspec: Optional[str] = None) -> Path:
        for relative_path, code in sources.items():
            self.source(relative_path, code)
        if pubspec is not None:
            self.pubspec(pubspec)
        return self.root


@pytest.fixture
def project(tmp_path):
    """Builder for a Flutter project rooted in tmp_path/app."""
    root = tmp_path / "app"
    root.mkdir()
    return ProjectBuilder(root)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch, tmp_path):
    """Isolate tests from DART_JANITOR_* variables and any ./.env file."""
    for name in ("CODE_DIR", "MANIFEST", "WORKERS", "EXTRA_CALLBACKS"):
        monkeypatch.delenv(f"DART_JANITOR_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()

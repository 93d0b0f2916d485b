from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from archivenet_setup.config import Settings


class MemoryFileSystem:
    """In-memory stand-in for LocalFileSystem."""

    def __init__(self, files: dict[Path, str] | None = None) -> None:
        self.files: dict[Path, str] = dict(files or {})
        self.dirs: set[Path] = set()
        self.writes: list[Path] = []

    def exists(self, path: Path) -> bool:
        return path in self.files or path in self.dirs

    def read_text(self, path: Path) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(str(path)) from None

    def write_text(self, path: Path, text: str) -> None:
        self.writes.append(path)
        self.files[path] = text

    def make_dirs(self, path: Path) -> None:
        self.dirs.update([path, *path.parents])


class RecordingExecutor:
    def __init__(self, status: int = 0, creates: Path | None = None) -> None:
        self.status = status
        self.creates = creates
        self.calls: list[tuple[list[str], Path]] = []

    def run(self, argv: Sequence[str], cwd: Path) -> int:
        self.calls.append((list(argv), cwd))
        if self.status == 0 and self.creates is not None:
            self.creates.parent.mkdir(parents=True, exist_ok=True)
            self.creates.write_text("// built\n")
        return self.status


ENV_TEXT = (
    "INSERT_CONTEXT_ENDPOINT=https://api.example.com/insert\n"
    "SEARCH_CONTEXT_ENDPOINT=https://api.example.com/search\n"
)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    project = tmp_path / "project"
    project.mkdir()
    return Settings(project_root=project, home=tmp_path / "home", platform="linux")


@pytest.fixture
def project(settings: Settings) -> Settings:
    """Settings whose project already has a built server and a valid .env."""
    settings.server_path.parent.mkdir(parents=True)
    settings.server_path.write_text("// server\n")
    settings.env_path.write_text(ENV_TEXT)
    return settings

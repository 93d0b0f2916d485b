from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, text: str) -> None: ...

    def make_dirs(self, path: Path) -> None: ...


class LocalFileSystem:
    """Disk-backed file system. Writes go through a sibling temp file."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        # Write through symlinks and keep the permissions of the file replaced.
        path = path.resolve()
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else None
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                handle.write(text)
                temp_path = Path(handle.name)
            if mode is not None:
                os.chmod(temp_path, mode)
            os.replace(temp_path, path)
        finally:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

SERVER_NAME = "archivenet"
LAUNCHER = "node"
BUILD_COMMAND = ("npm", "run", "build")
PROBE_TIMEOUT = 5.0


@dataclass(frozen=True)
class Settings:
    """Everything a setup run needs to know about its surroundings.

    Paths that the original script derived from its install location are
    carried here explicitly so every step can be exercised against a
    temporary directory.
    """

    project_root: Path
    home: Path
    platform: str = sys.platform
    appdata: Path | None = None
    server_name: str = SERVER_NAME
    launcher: str = LAUNCHER
    build_command: tuple[str, ...] = BUILD_COMMAND
    probe_timeout: float = PROBE_TIMEOUT
    server_relpath: tuple[str, ...] = ("dist", "index.js")
    env_filename: str = ".env"

    @property
    def server_path(self) -> Path:
        return self.project_root.joinpath(*self.server_relpath)

    @property
    def env_path(self) -> Path:
        return self.project_root / self.env_filename


def load_settings(project_root: str | os.PathLike[str] | None = None) -> Settings:
    raw_root = project_root or os.environ.get("ARCHIVENET_PROJECT_ROOT", "").strip()
    root = Path(raw_root).expanduser() if raw_root else Path.cwd()
    if not root.is_dir():
        raise RuntimeError(
            f"Project root {root} is not a directory. Point ARCHIVENET_PROJECT_ROOT or --project-root at the server checkout."
        )

    appdata = os.environ.get("APPDATA", "").strip()
    return Settings(
        project_root=root.resolve(),
        home=Path.home(),
        platform=sys.platform,
        appdata=Path(appdata) if appdata else None,
    )

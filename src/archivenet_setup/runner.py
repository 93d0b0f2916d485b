from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from .build import Executor, check_required_files, ensure_artifact, probe_server
from .config import Settings
from .envfile import read_env_file
from .fs import FileSystem, LocalFileSystem
from .hosts import get_host
from .merge import build_server_entry, update_host_config

logger = logging.getLogger(__name__)

Probe = Callable[[Settings, Mapping[str, str]], bool]


def run_setup(
    host: str,
    settings: Settings,
    *,
    fs: FileSystem | None = None,
    executor: Executor | None = None,
    probe: Probe | None = probe_server,
) -> Path:
    """Configure ``host`` to launch the server and return the config path.

    Each step is a hard gate: a SetupError from any of them stops the run
    before later steps touch the file system. Pass ``probe=None`` to skip the
    connectivity check.
    """
    get_host(host)
    fs = fs or LocalFileSystem()
    logger.info("Setting up ArchiveNet MCP Server for %s", host.upper())

    ensure_artifact(settings, executor=executor, fs=fs)
    check_required_files(settings, fs=fs)
    env_vars = read_env_file(settings.env_path, fs=fs)
    config_path = update_host_config(host, settings, env_vars, fs=fs)

    if probe is not None:
        probe(settings, build_server_entry(settings, env_vars).env)
    return config_path

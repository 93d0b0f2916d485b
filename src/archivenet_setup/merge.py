from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import Settings
from .envfile import OPTIONAL_KEYS, REQUIRED_KEYS
from .errors import ConfigIOError, MalformedExistingConfig
from .fs import FileSystem, LocalFileSystem
from .hosts import config_path_for, default_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerEntry:
    command: str
    args: list[str]
    env: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.command, "args": list(self.args), "env": dict(self.env)}


def build_server_entry(settings: Settings, env_vars: Mapping[str, str]) -> ServerEntry:
    env = {key: env_vars[key] for key in REQUIRED_KEYS}
    # Optional values are omitted rather than written out empty.
    for key in OPTIONAL_KEYS:
        value = env_vars.get(key)
        if value:
            env[key] = value
    return ServerEntry(
        command=settings.launcher,
        args=[str(settings.server_path)],
        env=env,
    )


def parse_host_config(text: str) -> dict[str, Any]:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedExistingConfig(f"invalid JSON: {exc}") from exc
    if not isinstance(doc, dict):
        raise MalformedExistingConfig(f"expected a JSON object, got {type(doc).__name__}")
    return doc


def load_host_config(host: str, config_path: Path, fs: FileSystem) -> dict[str, Any]:
    if not fs.exists(config_path):
        logger.info("Creating new %s configuration", host.upper())
        return default_document(host)

    logger.info("Reading existing %s configuration", host.upper())
    try:
        text = fs.read_text(config_path)
    except UnicodeDecodeError as exc:
        logger.warning("Existing config %s is not UTF-8 (%s), creating a new one", config_path, exc)
        return default_document(host)
    except OSError as exc:
        raise ConfigIOError("read", config_path, exc) from exc

    try:
        return parse_host_config(text)
    except MalformedExistingConfig as exc:
        logger.warning("Failed to parse existing config %s (%s), creating a new one", config_path, exc)
        return default_document(host)


def merge_server_entry(doc: dict[str, Any], name: str, entry: ServerEntry) -> dict[str, Any]:
    servers = doc.get("mcpServers")
    if not isinstance(servers, dict):
        if servers is not None:
            logger.warning("Replacing non-object mcpServers value in existing config")
        servers = {}
        doc["mcpServers"] = servers
    servers[name] = entry.to_dict()
    return doc


def render_host_config(doc: Mapping[str, Any]) -> str:
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


def update_host_config(
    host: str,
    settings: Settings,
    env_vars: Mapping[str, str],
    fs: FileSystem | None = None,
) -> Path:
    """Write this server's entry into ``host``'s config file and return its path.

    Other entries under ``mcpServers`` are left exactly as they were.
    """
    fs = fs or LocalFileSystem()
    logger.info("Setting up %s configuration", host.upper())

    config_path = config_path_for(host, settings)
    config_dir = config_path.parent
    if not fs.exists(config_dir):
        logger.info("Creating config directory: %s", config_dir)
        try:
            fs.make_dirs(config_dir)
        except OSError as exc:
            raise ConfigIOError("create directory", config_dir, exc) from exc

    doc = load_host_config(host, config_path, fs)
    merge_server_entry(doc, settings.server_name, build_server_entry(settings, env_vars))

    try:
        fs.write_text(config_path, render_host_config(doc))
    except OSError as exc:
        raise ConfigIOError("write", config_path, exc) from exc

    logger.info("%s configuration updated successfully", host.upper())
    logger.info("Config file location: %s", config_path)
    return config_path

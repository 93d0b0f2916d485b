from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from .errors import ConfigIOError, MissingConfiguration, MissingEnvFile
from .fs import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("INSERT_CONTEXT_ENDPOINT", "SEARCH_CONTEXT_ENDPOINT")
OPTIONAL_KEYS = ("API_KEY", "API_TIMEOUT")


def parse_env_text(text: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines; comments and blank lines are skipped.

    Later assignments of the same key win. Lines without ``=`` carry no value
    and are dropped.
    """
    values: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if sep and key:
            # Values are kept verbatim apart from trimming: no quote or comment handling.
            values[key] = value.strip()
    return values


def validate_env(values: Mapping[str, str]) -> dict[str, str]:
    missing = [key for key in REQUIRED_KEYS if not values.get(key)]
    if missing:
        raise MissingConfiguration(missing)
    return dict(values)


def read_env_file(path: Path, fs: FileSystem | None = None) -> dict[str, str]:
    fs = fs or LocalFileSystem()
    logger.info("Reading environment configuration from %s", path)
    try:
        text = fs.read_text(path)
    except FileNotFoundError:
        raise MissingEnvFile(path) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigIOError("read", path, exc) from exc

    values = validate_env(parse_env_text(text))
    logger.info("Environment configuration loaded")
    return values

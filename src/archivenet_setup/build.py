from __future__ import annotations

import asyncio
import logging
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from .config import Settings
from .errors import BuildFailed, MissingArtifact, MissingEnvFile
from .fs import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)


class Executor(Protocol):
    def run(self, argv: Sequence[str], cwd: Path) -> int:
        """Run ``argv`` to completion and return its exit status."""
        ...


class SubprocessExecutor:
    """Blocking executor; the child inherits stdout and stderr."""

    def run(self, argv: Sequence[str], cwd: Path) -> int:
        args = list(argv)
        # npm is a .cmd shim on Windows and needs the resolved path.
        args[0] = shutil.which(args[0]) or args[0]
        return subprocess.run(args, cwd=cwd, check=False).returncode


def ensure_artifact(
    settings: Settings,
    executor: Executor | None = None,
    fs: FileSystem | None = None,
) -> bool:
    """Build the server if its artifact is missing. Returns True if a build ran."""
    fs = fs or LocalFileSystem()
    if fs.exists(settings.server_path):
        logger.info("MCP server already built")
        return False

    executor = executor or SubprocessExecutor()
    command = settings.build_command
    logger.info("Building MCP server: %s", " ".join(command))
    try:
        status = executor.run(command, settings.project_root)
    except OSError as exc:
        raise BuildFailed(command, str(exc)) from exc
    if status != 0:
        raise BuildFailed(command, f"exit status {status}")

    logger.info("MCP server built successfully")
    return True


def check_required_files(settings: Settings, fs: FileSystem | None = None) -> None:
    fs = fs or LocalFileSystem()
    logger.info("Checking required files")
    if not fs.exists(settings.server_path):
        raise MissingArtifact(settings.server_path)
    logger.info("Found: MCP server (%s)", settings.server_path)
    if not fs.exists(settings.env_path):
        raise MissingEnvFile(settings.env_path)
    logger.info("Found: environment file (%s)", settings.env_path)


async def _handshake(params: StdioServerParameters) -> list[str]:
    async with stdio_client(params) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            result = await session.list_tools()
    return [tool.name for tool in result.tools]


def probe_server(settings: Settings, env: Mapping[str, str]) -> bool:
    """Start the server the way the host will and complete an MCP handshake.

    Best effort: any failure is logged and reported as False, never raised.
    """
    logger.info("Testing MCP server configuration")
    params = StdioServerParameters(
        command=settings.launcher,
        args=[str(settings.server_path)],
        env=dict(env),
        cwd=settings.project_root,
    )
    try:
        tool_names = asyncio.run(asyncio.wait_for(_handshake(params), settings.probe_timeout))
    except Exception as exc:
        logger.warning("Could not fully test server, but configuration has been created (%r)", exc)
        return False

    logger.info("MCP server configuration appears valid")
    if tool_names:
        logger.info("Tools available: %s", ", ".join(tool_names))
    return True

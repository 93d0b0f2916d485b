from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import Settings
from .errors import UnsupportedHost, UnsupportedPlatform

CLAUDE = "claude"
CURSOR = "cursor"

DARWIN = "darwin"
WIN32 = "win32"
LINUX = "linux"


@dataclass(frozen=True)
class Host:
    id: str
    display_name: str
    next_steps: tuple[str, ...]


HOSTS: dict[str, Host] = {
    CLAUDE: Host(
        id=CLAUDE,
        display_name="Claude Desktop",
        next_steps=(
            "Restart Claude Desktop completely",
            "Test the integration by sharing some personal information with Claude",
            "Ask Claude to recall that information to test the search functionality",
        ),
    ),
    CURSOR: Host(
        id=CURSOR,
        display_name="Cursor IDE",
        next_steps=(
            "Restart Cursor IDE completely",
            "Test the integration by using MCP features in Cursor",
            "Use the context search functionality in your coding workflow",
        ),
    ),
}

SUPPORTED_HOSTS = tuple(HOSTS)
SUPPORTED_PLATFORMS = (DARWIN, WIN32, LINUX)


@dataclass(frozen=True)
class PathTemplate:
    # "home" or "appdata"
    base: str
    parts: tuple[str, ...]

    def resolve(self, home: Path, appdata: Path | None = None) -> Path:
        if self.base == "appdata":
            root = appdata or home / "AppData" / "Roaming"
        else:
            root = home
        return root.joinpath(*self.parts)


_MAC_SUPPORT = ("Library", "Application Support")
_XDG_CONFIG = (".config",)

CONFIG_PATHS: dict[tuple[str, str], PathTemplate] = {
    (CLAUDE, DARWIN): PathTemplate("home", (*_MAC_SUPPORT, "Claude", "claude_desktop_config.json")),
    (CLAUDE, WIN32): PathTemplate("appdata", ("Claude", "claude_desktop_config.json")),
    (CLAUDE, LINUX): PathTemplate("home", (*_XDG_CONFIG, "Claude", "claude_desktop_config.json")),
    (CURSOR, DARWIN): PathTemplate("home", (*_MAC_SUPPORT, "Cursor", "User", "globalStorage", "mcp.json")),
    (CURSOR, WIN32): PathTemplate("appdata", ("Cursor", "User", "globalStorage", "mcp.json")),
    (CURSOR, LINUX): PathTemplate("home", (*_XDG_CONFIG, "Cursor", "User", "globalStorage", "mcp.json")),
}


def parse_host(raw: str) -> str:
    host = raw.strip().lower()
    if host not in HOSTS:
        raise UnsupportedHost(raw)
    return host


def get_host(host: str) -> Host:
    try:
        return HOSTS[host]
    except KeyError:
        raise UnsupportedHost(host) from None


def locate_config(host: str, platform: str, home: Path, appdata: Path | None = None) -> Path:
    """Return the absolute config file path for ``host`` on ``platform``."""
    get_host(host)
    template = CONFIG_PATHS.get((host, platform))
    if template is None:
        raise UnsupportedPlatform(platform, host)
    return template.resolve(home, appdata)


def config_path_for(host: str, settings: Settings) -> Path:
    return locate_config(host, settings.platform, settings.home, settings.appdata)


def default_document(host: str) -> dict[str, Any]:
    # Both hosts currently share the same empty layout.
    get_host(host)
    return {"mcpServers": {}}


def completion_message(host: str, settings: Settings, config_path: Path) -> str:
    h = get_host(host)
    label = h.id.upper()

    lines = ["", "Setup completed successfully!", "", f"Next steps for {label}:"]
    lines.extend(f"{i}. {step}" for i, step in enumerate(h.next_steps, start=1))
    lines += [
        "",
        "Example usage:",
        '   Save: "My favorite programming language is TypeScript"',
        '   Search: "What\'s my favorite programming language?"',
        "",
        "Configuration details:",
        f"   Server path: {settings.server_path}",
        f"   Config file: {config_path}",
        "",
        "Troubleshooting:",
        f"   - Check {label} logs if the connection fails",
        "   - Ensure your API endpoints are accessible",
        "   - Verify all file paths are correct",
        f"   - Make sure the {settings.env_filename} file is properly configured",
    ]
    return "\n".join(lines)

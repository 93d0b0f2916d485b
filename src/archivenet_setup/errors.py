from __future__ import annotations

from collections.abc import Iterable


class SetupError(Exception):
    """Base class for failures that abort a setup run."""


class UnsupportedPlatform(SetupError):
    def __init__(self, platform: str, host: str | None = None) -> None:
        self.platform = platform
        self.host = host
        target = f" for {host}" if host else ""
        super().__init__(f"Unsupported platform{target}: {platform}")


class UnsupportedHost(SetupError):
    def __init__(self, host: str) -> None:
        self.host = host
        super().__init__(f"Unsupported host: {host}")


class MissingArtifact(SetupError):
    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(
            f"MCP server not found at {path}. Run \"npm run build\" to build the server first."
        )


class MissingEnvFile(SetupError):
    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(
            f"Environment file not found at {path}. Copy .env.example to .env and configure your endpoints."
        )


class MissingConfiguration(SetupError):
    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(
            "Missing required environment variables: " + ", ".join(self.missing)
        )


class MalformedExistingConfig(SetupError):
    """Existing host config could not be used. Recovered by the merger."""


class ConfigIOError(SetupError):
    def __init__(self, action: str, path: object, reason: object) -> None:
        self.action = action
        self.path = path
        super().__init__(f"Failed to {action} {path}: {reason}")


class BuildFailed(SetupError):
    def __init__(self, command: Iterable[str], reason: str) -> None:
        self.command = tuple(command)
        super().__init__(f"Failed to build MCP server ({' '.join(self.command)}): {reason}")

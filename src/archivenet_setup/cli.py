from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .build import probe_server
from .config import load_settings
from .errors import SetupError
from .hosts import HOSTS, SUPPORTED_HOSTS, completion_message, parse_host
from .logging_config import setup_logging
from .runner import run_setup

PROG = "setup-mcp"


def _epilog() -> str:
    hosts = "\n".join(f"  {h.id:<9} Setup for {h.display_name}" for h in HOSTS.values())
    examples = "\n".join(
        f"  {PROG} {h.id:<9} # Configure for {h.display_name}" for h in HOSTS.values()
    )
    return (
        f"supported hosts:\n{hosts}\n\n"
        f"examples:\n{examples}\n\n"
        "environment:\n"
        "  Make sure you have a .env file with your API endpoints configured.\n"
        "  Copy .env.example to .env and update the values."
    )


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        # Usage errors share the exit status of every other failure.
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog=PROG,
        description="ArchiveNet MCP setup tool: register the MCP server with a host application",
        epilog=_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("host", nargs="?", help="host application to configure")
    parser.add_argument(
        "--project-root",
        help="directory holding dist/ and .env (default: $ARCHIVENET_PROJECT_ROOT or cwd)",
    )
    parser.add_argument("--log-level", help="log level (default: $LOG_LEVEL or INFO)")
    parser.add_argument(
        "--skip-probe", action="store_true", help="skip the post-setup server connectivity check"
    )
    return parser


def _print_missing_host(parser: argparse.ArgumentParser) -> None:
    err = sys.stderr
    print("Please specify a host to configure.", file=err)
    print(f"\nSupported hosts: {', '.join(SUPPORTED_HOSTS)}", file=err)
    print(parser.format_usage().rstrip(), file=err)
    print(f"Example: {PROG} {SUPPORTED_HOSTS[0]}", file=err)
    print(f"\nFor more help: {PROG} --help", file=err)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.host:
        _print_missing_host(parser)
        return 1

    setup_logging(args.log_level)

    try:
        host = parse_host(args.host)
        settings = load_settings(args.project_root)
        probe = None if args.skip_probe else probe_server
        config_path = run_setup(host, settings, probe=probe)
    except (SetupError, RuntimeError) as exc:
        print(f"Setup failed: {exc}", file=sys.stderr)
        return 1

    print(completion_message(host, settings, config_path))
    return 0

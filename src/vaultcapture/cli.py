"""Command-line interface entry point for vaultcapture."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from typing import Any

from vaultcapture import __version__, pipelines
from vaultcapture.errors import VaultCaptureError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultcapture", description="vaultcapture command-line interface"
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    subparsers = parser.add_subparsers(dest="command")

    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument(
        "--config-path", dest="config_path", help="Override path to config file"
    )
    shared.add_argument(
        "--verbose",
        dest="verbose_logging",
        action="store_true",
        default=None,
        help="Enable debug logging",
    )

    validate = subparsers.add_parser(
        "validate", parents=[shared], help="Validate note files against the vault format"
    )
    validate.add_argument("paths", nargs="+", help="Markdown files to validate")

    capture = subparsers.add_parser(
        "capture", parents=[shared], help="Capture a note and commit it to the vault"
    )
    capture.add_argument(
        "--project-path", dest="project_path", required=True, help="Vault project path"
    )
    capture.add_argument("--text", dest="text", help="Raw capture text")
    capture.add_argument("--image", dest="image_path", help="Image file to OCR")
    capture.add_argument(
        "--format",
        dest="response_format",
        choices=["structured", "markdown"],
        help="Ask the model for structured JSON or raw Markdown",
    )
    capture.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=None,
        help="Print the validated note instead of committing it",
    )

    serve = subparsers.add_parser("serve", parents=[shared], help="Run the HTTP API")
    serve.add_argument("--host", dest="host", help="Bind address")
    serve.add_argument("--port", dest="port", type=int, help="Bind port")

    subparsers.add_parser(
        "init", parents=[shared], help="Create or complete the config file"
    )

    config_parser = subparsers.add_parser(
        "config", help="Inspect or edit configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")
    config_subparsers.add_parser(
        "show", parents=[shared], help="Show the effective configuration"
    )
    config_set = config_subparsers.add_parser(
        "set", parents=[shared], help="Write one setting to the config file"
    )
    config_set.add_argument("setting_key", help="Setting name, e.g. notes_path")
    config_set.add_argument("setting_value", help="New value")

    return parser


def _normalize_cli_options(namespace: argparse.Namespace) -> dict[str, Any]:
    cli_options = {
        key: value
        for key, value in vars(namespace).items()
        if key not in {"command", "config_command", "version"}
    }
    return {key: value for key, value in cli_options.items() if value is not None}


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        print(__version__)
        raise SystemExit(0)
    if args.command is None:
        parser.print_help()
        return 0

    handlers: dict[str, Callable[[dict[str, Any]], int]] = {
        "validate": pipelines.run_validate,
        "capture": pipelines.run_capture,
        "serve": pipelines.run_serve,
        "init": pipelines.run_init,
        "config": pipelines.run_config_show,
    }
    if args.command == "config" and args.config_command == "set":
        handlers["config"] = pipelines.run_config_set

    cli_options = _normalize_cli_options(args)
    try:
        exit_code = handlers[args.command](cli_options)
    except VaultCaptureError as exc:
        print(f"vaultcapture: error: {exc}", file=sys.stderr)
        if exc.hint:
            print(f"vaultcapture: hint: {exc.hint}", file=sys.stderr)
        raise SystemExit(1) from exc
    if exit_code:
        raise SystemExit(exit_code)
    return 0


if __name__ == "__main__":  # pragma: no cover
    main()

"""Unified entrypoint for CLI and HTTP service usage."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bside.config import load_config
from bside.main import main as cli_main
from bside.ui.app import create_app


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="B-Side icon service launcher")
    subparsers = parser.add_subparsers(dest="command")

    ui_parser = subparsers.add_parser("ui", help="Launch the HTTP service")
    ui_parser.add_argument("--host", help="Service host (overrides config)")
    ui_parser.add_argument("--port", type=int, help="Service port (overrides config)")
    ui_parser.add_argument("--config", type=Path, help="Optional JSON config path")
    ui_parser.add_argument("--preset", default="balanced", help="Quality preset")
    ui_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    cli_parser = subparsers.add_parser("cli", help="Render a single file")
    cli_parser.add_argument("cli_args", nargs=argparse.REMAINDER, help="Arguments passed to the CLI")

    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    if args.command in (None, "ui"):
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
        config = load_config(getattr(args, "config", None), getattr(args, "preset", "balanced"))
        app = create_app(config)
        host = getattr(args, "host", None) or config.service.host
        port = getattr(args, "port", None) or config.service.port
        app.run(host=host, port=port, debug=bool(getattr(args, "debug", False)))
        return

    if args.command == "cli":
        cli_main(args.cli_args)
        return

    raise SystemExit(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()

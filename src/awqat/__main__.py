from __future__ import annotations

import argparse
from pathlib import Path

from .config import ConfigManager
from .logging_setup import configure_logging
from .tui.app import AwqatApp


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="awqat", description="Daily prayer times with next-prayer notifications")
    parser.add_argument("--config", type=Path, help="Path to config file (default: ~/.config/awqat/config.toml)")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    config_manager = ConfigManager(args.config)
    config = config_manager.load()
    configure_logging(config.logging, debug=args.debug)
    AwqatApp(config_manager, config).run()


if __name__ == "__main__":  # pragma: no cover
    main()

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from streamhub.infrastructure.config import load_config
from streamhub.infrastructure.logging.setup import configure_logging
from streamhub.interfaces.main import build_app

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="streamhub")

    # Server options
    parser.add_argument("--host", default=None, help="Bind host (overrides api.host).")
    parser.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides api.port).",
    )

    # Config wiring flags
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--aggregator-url",
        default=None,
        help="Override the aggregation API base URL.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    return parser.parse_args(list(argv) if argv is not None else None)


def build_cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Flat CLI overrides; load_config folds them into their sections."""
    overrides: dict[str, Any] = {}
    if args.host:
        overrides["api_host"] = args.host
    if args.port:
        overrides["api_port"] = args.port
    if args.aggregator_url:
        overrides["aggregator_base_url"] = args.aggregator_url
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    return overrides


def start(argv: Iterable[str] | None = None) -> None:
    """Process entrypoint: load config exactly once, then serve."""
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=build_cli_overrides(args),
    )

    log_config = configure_logging(config)

    uvicorn.run(
        build_app(config),
        host=config.api.host,
        port=config.api.port,
        log_config=log_config,
    )


if __name__ == "__main__":
    raise SystemExit(start())

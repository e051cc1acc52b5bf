from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .commands import canonicalize as cmd_canonicalize
from .commands import inspect as cmd_inspect
from .commands import validate as cmd_validate
from .config import Settings, find_config
from .models import CspfError

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}

logger = logging.getLogger(__name__)


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler()
    if getattr(handler.stream, "isatty", lambda: False)():
        handler.setFormatter(ColorFormatter(LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect and validate CSPF playlists")
    parser.add_argument("--config", type=Path, help="Path to cspf.yaml")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Python logging level (overrides the config file)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    inspect_parser = subparsers.add_parser("inspect", help="Print a playlist summary")
    inspect_parser.add_argument("file", type=Path, help="CSPF file to read")
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the full playlist record as JSON",
    )
    validate_parser = subparsers.add_parser(
        "validate", help="Check that files decode to valid CSPF playlists"
    )
    validate_parser.add_argument("files", type=Path, nargs="+", help="CSPF files to check")
    canonical_parser = subparsers.add_parser(
        "canonicalize", help="Re-encode a file with the configured canonical codec"
    )
    canonical_parser.add_argument("file", type=Path, help="CSPF file to re-encode")
    canonical_parser.add_argument(
        "--out", type=Path, default=None, help="Write here instead of in place"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config_path = find_config(args.config)
    settings = Settings.load(config_path) if config_path else Settings()
    configure_logging(args.log_level or settings.logging.level)
    if config_path:
        logger.debug("Using config %s", config_path)

    if args.command == "inspect":
        try:
            print(cmd_inspect.run(args.file, as_json=args.json))
        except OSError as exc:
            logger.error("Cannot read %s: %s", args.file, exc.strerror or exc)
            return 1
        except CspfError as exc:
            logger.error("%s: %s", args.file, exc)
            return 1
        return 0

    if args.command == "validate":
        report = cmd_validate.run(args.files)
        for line in report.render():
            print(line)
        return 0 if report.ok else 1

    if args.command == "canonicalize":
        try:
            cmd_canonicalize.run(args.file, args.out, codec=settings.codec)
        except OSError as exc:
            logger.error("Cannot rewrite %s: %s", args.file, exc.strerror or exc)
            return 1
        except CspfError as exc:
            logger.error("%s: %s", args.file, exc)
            return 1
        return 0

    return 2  # pragma: no cover - argparse rejects unknown commands


if __name__ == "__main__":
    sys.exit(main())

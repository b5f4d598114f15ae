"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def positive_int(value: str) -> int:
    """Parse a strictly positive integer for argparse arguments.

    Raises:
        argparse.ArgumentTypeError: If the value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be greater than zero")
    return parsed


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    """Add the shared --config option (config name under configs/)."""
    parser.add_argument(
        "--config",
        default=None,
        help="Config name (prod/test). Defaults to CONFIG_ENV or 'prod'.",
    )

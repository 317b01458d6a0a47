"""Lightweight logging setup for the command line tool."""

import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    # Configure root logger once; log to stderr so stdout stays machine-readable.
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # urllib3 logs full URLs at DEBUG; keep it at INFO and above
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))

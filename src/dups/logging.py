"""Logging configuration for dups."""

from __future__ import annotations

import logging

PROG = "dups"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the dups root logger.

    Diagnostics go to stderr, prefixed with the program name.
    """
    if verbose:
        level = logging.DEBUG
        fmt = f"{PROG}: %(levelname)s: %(message)s"
    elif quiet:
        level = logging.ERROR
        fmt = f"{PROG}: %(message)s"
    else:
        level = logging.WARNING
        fmt = f"{PROG}: %(message)s"

    root_logger = logging.getLogger("dups")
    root_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

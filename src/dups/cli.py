"""CLI argument parsing and run dispatch."""

from __future__ import annotations

from dups.classifier import IDENTITY_CONFLICT_POLICIES
from dups.config import load_config, merge_config_into_args
from dups.errors import FatalError, UsageError
from dups.finder import find_duplicates
from dups.logging import PROG, configure_logging
from dups.reporter import Reporter

import argparse
import logging
import pathlib
import sys

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = _ArgumentParser(
        prog=PROG,
        description="Find sets of byte-identical regular files under one or more directories.",
    )
    parser.add_argument("roots", nargs="*", metavar="directory", help="Directory to scan")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log pipeline statistics")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Suppress warnings")

    parser.add_argument(
        "--block-size",
        default=None,
        metavar="N|auto",
        help="Comparison window in bytes, or 'auto' for the filesystem block size (default: 8192)",
    )
    parser.add_argument(
        "--on-identity-conflict",
        choices=IDENTITY_CONFLICT_POLICIES,
        default=None,
        help="What to do when one file is reached through two paths, e.g. hard links (default: abort)",
    )
    parser.add_argument("--progress", action="store_true", default=None, help="Show a progress bar on stderr")
    parser.add_argument("--config", type=pathlib.Path, default=None, help="Read settings from a TOML file")
    return parser


def run(args: argparse.Namespace) -> int:
    """Scan the roots in *args* and print duplicate sets. Returns the exit status."""
    if not args.roots:
        raise UsageError("at least one directory is required")

    config = load_config(args.config) if args.config is not None else {}
    merge_config_into_args(args, config)

    reporter = Reporter(sys.stdout)
    try:
        find_duplicates(
            args.roots,
            reporter.emit,
            block_size=args.block_size,
            on_identity_conflict=args.on_identity_conflict,
            progress=args.progress,
        )
    finally:
        sys.stdout.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        return run(args)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        logger.error("%s", e)
    except FatalError as e:
        logger.error("%s", e)
    return 1

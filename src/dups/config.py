"""Optional configuration file loading and merging with CLI arguments."""

from __future__ import annotations

from dups.classifier import IDENTITY_CONFLICT_POLICIES
from dups.errors import UsageError
from dups.refiner import DEFAULT_BLOCK_SIZE

import logging
import pathlib
import tomllib


logger = logging.getLogger(__name__)

AUTO = "auto"

_DEFAULTS: dict[str, object] = {
    "block_size": DEFAULT_BLOCK_SIZE,
    "on_identity_conflict": "abort",
    "progress": False,
}


def load_config(path: pathlib.Path) -> dict:
    """Load a TOML config file and return its contents as a dict.

    Returns {} if the file does not exist or cannot be parsed.
    """
    if not path.exists():
        logger.warning(f"config file not found: {path}")
        return {}
    try:
        return tomllib.loads(path.read_text())
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"ignoring config file {path}: {e}")
        return {}


def parse_block_size(value: object) -> int | None:
    """Turn a block size setting into a byte count, or None for ``auto``."""
    if isinstance(value, str):
        if value.strip().lower() == AUTO:
            return None
        try:
            value = int(value)
        except ValueError:
            raise UsageError(f"invalid block size: {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise UsageError(f"invalid block size: {value!r}")
    return value


def merge_config_into_args(args, config: dict) -> None:
    """Three-layer merge: CLI > config > hardcoded defaults.

    Mutates *args* in place. ``args.block_size`` ends up as a positive
    int, or None meaning "use the filesystem's preferred I/O size".
    """
    block_size = getattr(args, "block_size", None)
    if block_size is None:
        block_size = config.get("block_size", _DEFAULTS["block_size"])
    args.block_size = parse_block_size(block_size)

    policy = getattr(args, "on_identity_conflict", None)
    if policy is None:
        policy = config.get("on_identity_conflict", _DEFAULTS["on_identity_conflict"])
    if policy not in IDENTITY_CONFLICT_POLICIES:
        raise UsageError(f"invalid on_identity_conflict: {policy!r}")
    args.on_identity_conflict = policy

    if getattr(args, "progress", None) is None:
        cfg_val = config.get("progress")
        if cfg_val is None:
            cfg_val = _DEFAULTS["progress"]
        elif not isinstance(cfg_val, bool):
            raise UsageError(f"invalid progress: {cfg_val!r}")
        args.progress = cfg_val

"""Error hierarchy for dups.

Recoverable errors narrow the scan (skip a subtree, drop one file).
Fatal errors abort the whole run; only the CLI turns them into an exit code.
"""

from __future__ import annotations


class DupsError(Exception):
    """Base class for all dups errors."""


class UsageError(DupsError):
    """Bad invocation: no roots, or an invalid option value."""


class TraversalError(DupsError):
    """A directory could not be listed."""

    def __init__(self, path: str, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"cannot open directory {path}: {error.strerror}")


class OpenError(DupsError):
    """A file could not be opened for comparison."""

    def __init__(self, path: str, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"cannot open {path}: {error.strerror}")


class FatalError(DupsError):
    """Any condition that makes the result untrustworthy."""


class StatError(FatalError):
    def __init__(self, path: str, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"cannot stat {path}: {error.strerror}")


class ReadError(FatalError):
    def __init__(self, path: str, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"read error on {path}: {error.strerror}")


class TruncationError(FatalError):
    """A file returned fewer bytes than its declared size promised."""

    def __init__(self, path: str, expected: int, got: int) -> None:
        self.path = path
        self.expected = expected
        self.got = got
        super().__init__(f"unexpected end of file: {path}")


class IdentityConflict(FatalError):
    """The same (device, inode) was reached through two paths."""

    def __init__(self, path: str, other: str) -> None:
        self.path = path
        self.other = other
        super().__init__(f"same file: {path} and {other}")


class AllocationError(FatalError):
    """Memory allocation failed."""

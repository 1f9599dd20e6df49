"""Output of duplicate sets."""

from __future__ import annotations

from typing import TextIO

import sys


class Reporter:
    """Writes duplicate sets to a text stream.

    One path per line; consecutive sets are separated by a single blank line.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.count = 0

    def emit(self, paths: list[str]) -> None:
        if len(paths) < 2:
            raise ValueError(f"a duplicate set needs at least two paths, got {len(paths)}")
        lines = [f"{p}\n" for p in paths]
        if self.count:
            lines.insert(0, "\n")
        self.stream.write("".join(lines))
        self.count += 1

"""Progressive content comparison of same-size candidate groups.

Members of a group are read in lock-step, one window at a time, and the
group is split by equality of the window just read. A branch stops as soon
as it holds a single file or all of its bytes have been consumed. No file
is hashed or buffered whole.
"""

from __future__ import annotations

from collections.abc import Callable

from dups.classifier import Group
from dups.errors import OpenError

import logging

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 8 * 1024

Emit = Callable[[list[str]], None]


class ContentRefiner:
    """Resolves candidate groups into duplicate sets.

    *block_size* is the window capacity; ``None`` picks the largest
    preferred I/O size reported for the members of each size class.
    """

    def __init__(self, emit: Emit, block_size: int | None = DEFAULT_BLOCK_SIZE) -> None:
        if block_size is not None and block_size <= 0:
            raise ValueError(f"block size must be positive, got {block_size}")
        self.emit = emit
        self.block_size = block_size
        self.windows_read = 0
        self.sets_emitted = 0

    def _block_size_for(self, group: Group) -> int:
        if self.block_size is not None:
            return self.block_size
        return max((m.blksize for m in group.members), default=0) or DEFAULT_BLOCK_SIZE

    def _resolve(self, group: Group) -> None:
        """Emit a finished group if it is a real set, then release it."""
        if len(group) > 1:
            self.emit(group.paths)
            self.sets_emitted += 1
        group.release()

    def _open_members(self, group: Group) -> None:
        kept = []
        for m in group.members:
            try:
                m.open()
            except OpenError as e:
                logger.warning("%s", e)
                continue
            kept.append(m)
        group.members = kept

    def _split(self, group: Group, block_size: int) -> list[Group]:
        length = min(block_size, group.remaining)
        buckets: dict[bytes, Group] = {}
        for m in group.members:
            window = m.read_window(length)
            self.windows_read += 1
            bucket = buckets.get(window)
            if bucket is None:
                bucket = buckets[window] = Group(size=group.size)
            # members arrive in (device, inode) order, so appending keeps it
            bucket.members.append(m)
        for m in group.members:
            m.window = None
        return list(buckets.values())

    def refine(self, group: Group) -> None:
        """Compare the members of *group* and emit every duplicate set found."""
        if group.remaining == 0:
            # zero-length files are equal without reading them
            self._resolve(group)
            return

        block_size = self._block_size_for(group)
        records = list(group.members)
        try:
            self._open_members(group)
            if len(group) < 2:
                group.release()
                return

            pending = [group]
            while pending:
                current = pending.pop()
                unresolved = []
                for sub in self._split(current, block_size):
                    if sub.remaining == 0 or len(sub) == 1:
                        self._resolve(sub)
                    else:
                        unresolved.append(sub)
                pending.extend(reversed(unresolved))
        finally:
            for r in records:
                r.close()

"""Size classification: bucket discovered files by declared size."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from operator import attrgetter

from dups.errors import IdentityConflict
from dups.scanner import FileRecord

import bisect
import logging

logger = logging.getLogger(__name__)

ABORT = "abort"
SKIP = "skip"
IDENTITY_CONFLICT_POLICIES = (ABORT, SKIP)

_identity = attrgetter("identity")


@dataclass(eq=False)
class Group:
    """A candidate duplicate set.

    Members are kept sorted by (device, inode) and all of them agree on
    every byte consumed so far.
    """

    size: int
    members: list[FileRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.members)

    @property
    def remaining(self) -> int:
        return self.members[0].remaining if self.members else 0

    @property
    def paths(self) -> list[str]:
        return [m.path for m in self.members]

    def add(self, record: FileRecord) -> None:
        """Insert *record* in (device, inode) order.

        Raises IdentityConflict if a member already has the same identity.
        """
        i = bisect.bisect_left(self.members, record.identity, key=_identity)
        if i < len(self.members) and self.members[i].identity == record.identity:
            raise IdentityConflict(record.path, self.members[i].path)
        self.members.insert(i, record)

    def release(self) -> None:
        for m in self.members:
            m.close()
        self.members = []


class SizeClassifier:
    """Maps declared size to the Group of files having that size."""

    def __init__(self, on_identity_conflict: str = ABORT) -> None:
        if on_identity_conflict not in IDENTITY_CONFLICT_POLICIES:
            raise ValueError(f"unknown identity conflict policy: {on_identity_conflict!r}")
        self.on_identity_conflict = on_identity_conflict
        self.groups: dict[int, Group] = {}
        self.files = 0

    def classify(self, record: FileRecord) -> None:
        group = self.groups.get(record.size)
        if group is None:
            group = self.groups[record.size] = Group(size=record.size)
        try:
            group.add(record)
        except IdentityConflict as e:
            if self.on_identity_conflict == ABORT:
                raise
            logger.warning("%s (ignoring %s)", e, record.path)
            return
        self.files += 1

    def candidates(self) -> Iterator[Group]:
        """Yield groups with two or more members in ascending size order.

        Singleton groups are discarded. The classifier is empty afterwards.
        """
        groups, self.groups = self.groups, {}
        singletons = 0
        for size in sorted(groups):
            group = groups[size]
            if len(group) < 2:
                group.release()
                singletons += 1
                continue
            yield group
        logger.debug(
            f"size classification: {self.files} files, {len(groups)} size class(es), "
            f"{singletons} unique by size"
        )

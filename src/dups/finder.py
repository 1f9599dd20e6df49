"""Duplicate detection pipeline: walk, classify by size, refine by content."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tqdm import tqdm

from dups.classifier import ABORT
from dups.classifier import SizeClassifier
from dups.errors import AllocationError
from dups.refiner import DEFAULT_BLOCK_SIZE
from dups.refiner import ContentRefiner
from dups.refiner import Emit
from dups.scanner import walk

import logging
import os

logger = logging.getLogger(__name__)


@dataclass
class ScanStats:
    """Counters collected over one run."""

    files: int = 0
    size_classes: int = 0
    candidate_classes: int = 0
    windows_read: int = 0
    duplicate_sets: int = 0


def find_duplicates(
    roots: Iterable[str | os.PathLike],
    emit: Emit,
    *,
    block_size: int | None = DEFAULT_BLOCK_SIZE,
    on_identity_conflict: str = ABORT,
    progress: bool = False,
) -> ScanStats:
    """Find sets of byte-identical regular files under *roots*.

    *emit* is called once per duplicate set with its paths in
    (device, inode) order. Sets resolved before a fatal error have
    already been emitted when the error propagates.
    """
    classifier = SizeClassifier(on_identity_conflict=on_identity_conflict)
    refiner = ContentRefiner(emit, block_size=block_size)
    try:
        return _run(roots, classifier, refiner, progress)
    except MemoryError as e:
        raise AllocationError("out of memory") from e


def _run(
    roots: Iterable[str | os.PathLike],
    classifier: SizeClassifier,
    refiner: ContentRefiner,
    progress: bool,
) -> ScanStats:
    stats = ScanStats()
    for root in roots:
        logger.debug(f"scanning {os.fspath(root)}")
        walk(root, classifier)

    stats.files = classifier.files
    stats.size_classes = len(classifier.groups)
    candidates = list(classifier.candidates())
    stats.candidate_classes = len(candidates)
    logger.debug(
        f"{stats.candidate_classes} size class(es) with "
        f"{sum(len(g) for g in candidates)} files to compare"
    )

    for group in tqdm(candidates, desc="Comparing", unit="class", disable=not progress):
        refiner.refine(group)

    stats.windows_read = refiner.windows_read
    stats.duplicate_sets = refiner.sets_emitted
    logger.debug(
        f"content refinement: {stats.windows_read} window(s) read, "
        f"{stats.duplicate_sets} duplicate set(s)"
    )
    return stats


def collect_duplicates(roots: Iterable[str | os.PathLike], **options) -> list[list[str]]:
    """Run :func:`find_duplicates` and return the sets as a list."""
    sets: list[list[str]] = []
    find_duplicates(roots, sets.append, **options)
    return sets

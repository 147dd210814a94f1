"""Contributor bookkeeping across all repositories of a run."""

from __future__ import annotations

import logging
from typing import Dict, List, Set

from .models import BucketKey

logger = logging.getLogger(__name__)


class ContributorLedger:
    """Tracks established and new contributors plus per-week first sightings.

    ``known`` collects authors seen outside the trailing window and
    ``recent`` authors seen inside it. Both are provisional until
    :meth:`finalize` reconciles them.
    """

    def __init__(self) -> None:
        self.known: Set[str] = set()
        self.recent: Set[str] = set()
        self.bucket_new_contributors: Dict[BucketKey, Set[str]] = {}
        self._finalized = False

    def add_new_contributor_to_bucket(self, bucket_key: BucketKey, author: str) -> bool:
        """Attribute an author to a bucket the first time they are seen in the run.

        The bucket is created even when the author was already attributed
        elsewhere, so it still counts as a week with zero new contributors.

        Returns:
            ``True`` if the author was newly attributed to ``bucket_key``.
        """
        bucket = self.bucket_new_contributors.setdefault(bucket_key, set())

        for contributors in self.bucket_new_contributors.values():
            if author in contributors:
                return False

        bucket.add(author)
        return True

    def record(self, author: str, in_window: bool) -> None:
        """Provisionally file an author as recent or known."""
        if in_window:
            self.recent.add(author)
        else:
            self.known.add(author)

    def finalize(self) -> None:
        """Make ``known`` and ``recent`` disjoint.

        Recent authors who were also seen outside the window are established
        and leave ``recent``. Afterwards ``known | recent`` is every tracked
        author and ``recent`` holds only those active exclusively inside the
        window. Safe to call more than once.
        """
        if self._finalized:
            return

        self.recent -= self.known
        self._finalized = True

        logger.debug(
            "Finalized contributor ledger",
            extra={"known": len(self.known), "recent": len(self.recent)},
        )

    def new_contributor_counts(self) -> List[int]:
        """Number of newly attributed contributors per bucket, in week order."""
        return [len(self.bucket_new_contributors[key]) for key in sorted(self.bucket_new_contributors)]

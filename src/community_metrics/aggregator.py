"""Accumulation of classified pull requests and issues into run-wide metrics."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from .classifier import classify
from .config import DEFAULT_BOT_ACCOUNTS, WINDOW_DAYS
from .ledger import ContributorLedger
from .models import BucketKey, Classification, WorkItem

logger = logging.getLogger(__name__)


class MetricsAggregator:
    """Single accumulator threaded through the whole collection phase.

    Business logic:
    - Every pull request, bot-authored or not, increments its weekly bucket.
    - Closure latency is sampled only for closed items created inside the
      trailing window.
    - Non-bot authors are attributed to the week they are first seen in and
      filed in the contributor ledger.
    """

    def __init__(
        self,
        now: Optional[datetime] = None,
        window_days: int = WINDOW_DAYS,
        bot_accounts: Iterable[str] = DEFAULT_BOT_ACCOUNTS,
    ) -> None:
        self.now = now or datetime.now(timezone.utc)
        self.window_days = window_days
        self.bot_accounts = tuple(bot_accounts)

        self.bucket_pull_counts: Dict[BucketKey, int] = {}
        self.seconds_to_close_pulls: List[float] = []
        self.seconds_to_close_issues: List[float] = []
        self.ledger = ContributorLedger()

    def _classify(self, item: WorkItem) -> Classification:
        return classify(
            item,
            now=self.now,
            window_days=self.window_days,
            bot_accounts=self.bot_accounts,
        )

    def _track_contributor(self, item: WorkItem, classification: Classification) -> None:
        if classification.is_bot or item.author is None:
            return

        if self.ledger.add_new_contributor_to_bucket(classification.bucket_key, item.author):
            logger.debug(
                "First contribution attributed",
                extra={"author": item.author, "bucket": classification.bucket_key, "item_id": item.id},
            )
        self.ledger.record(item.author, classification.in_window)

    def add_pull(self, pull: WorkItem) -> None:
        """Fold one pull request into the running metrics."""
        classification = self._classify(pull)
        key = classification.bucket_key

        self.bucket_pull_counts[key] = self.bucket_pull_counts.get(key, 0) + 1

        if classification.in_window and classification.closure_seconds is not None:
            self.seconds_to_close_pulls.append(classification.closure_seconds)

        self._track_contributor(pull, classification)

    def add_issue(self, issue: WorkItem) -> None:
        """Fold one issue into the running metrics; issues are never bucket-counted."""
        classification = self._classify(issue)

        if classification.in_window and classification.closure_seconds is not None:
            self.seconds_to_close_issues.append(classification.closure_seconds)

        self._track_contributor(issue, classification)

    def pull_counts(self) -> List[int]:
        """Pull requests per bucket, in week order."""
        return [self.bucket_pull_counts[key] for key in sorted(self.bucket_pull_counts)]

"""Per-item classification of pull requests and issues.

Classification is pure: the same item, reference time and window always
produce the same result, and nothing is accumulated here.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional

from .config import DEFAULT_BOT_ACCOUNTS, WINDOW_DAYS
from .models import BucketKey, Classification, WorkItem

BOT_SUFFIX = "[bot]"


def is_bot(author: str, bot_accounts: Iterable[str] = DEFAULT_BOT_ACCOUNTS) -> bool:
    """Return whether an author is an automation account."""
    return author.endswith(BOT_SUFFIX) or author in tuple(bot_accounts)


def bucket_key_for(created_at: datetime) -> BucketKey:
    """Return the ISO ``(year, week)`` bucket of a creation timestamp."""
    iso_year, iso_week, _ = created_at.isocalendar()
    return BucketKey(iso_year=iso_year, iso_week=iso_week)


def compute_closure_seconds(item: WorkItem) -> Optional[float]:
    """Seconds from creation to close, or ``None`` for items still open."""
    if item.closed_at is None:
        return None
    return (item.closed_at - item.created_at).total_seconds()


def is_within_window(created_at: datetime, now: datetime, window_days: int = WINDOW_DAYS) -> bool:
    """Strict check: an item created exactly ``window_days`` ago is outside."""
    return now - created_at < timedelta(days=window_days)


def classify(
    item: WorkItem,
    now: datetime,
    window_days: int = WINDOW_DAYS,
    bot_accounts: Iterable[str] = DEFAULT_BOT_ACCOUNTS,
) -> Classification:
    """Derive bucket, closure latency, window membership and bot status.

    Items without an author are reported as bots so they never reach
    contributor tracking; they still count towards buckets and latency.
    """
    return Classification(
        bucket_key=bucket_key_for(item.created_at),
        closure_seconds=compute_closure_seconds(item),
        in_window=is_within_window(item.created_at, now, window_days),
        is_bot=item.author is None or is_bot(item.author, bot_accounts),
    )

"""Tests for per-item classification."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from community_metrics.classifier import bucket_key_for, classify, is_bot
from community_metrics.models import BucketKey, WorkItem

NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def _item(
    author: str | None = "alice",
    created_at: datetime | None = None,
    closed_at: datetime | None = None,
) -> WorkItem:
    return WorkItem(
        id=1,
        author=author,
        created_at=created_at or NOW - timedelta(days=5),
        closed_at=closed_at,
        is_pull_request=True,
    )


def test_is_bot_matches_suffix_and_deny_list():
    """Verify bot detection covers the [bot] suffix and listed accounts only."""
    assert is_bot("dependabot[bot]")
    assert is_bot("snyk-bot")
    assert is_bot("custom-ci", bot_accounts=("custom-ci",))
    assert not is_bot("alice")
    assert not is_bot("robotics-fan")
    assert not is_bot("[bot]alice")


def test_bucket_key_uses_iso_week_numbering():
    """Verify dates around new year fall into the ISO year of their week."""
    assert bucket_key_for(datetime(2026, 1, 1, tzinfo=timezone.utc)) == BucketKey(2026, 1)
    assert bucket_key_for(datetime(2027, 1, 1, tzinfo=timezone.utc)) == BucketKey(2026, 53)
    assert bucket_key_for(datetime(2024, 12, 30, tzinfo=timezone.utc)) == BucketKey(2025, 1)


def test_bucket_keys_order_by_year_then_week():
    """Verify bucket keys sort chronologically."""
    keys = [BucketKey(2026, 2), BucketKey(2025, 52), BucketKey(2026, 1)]

    assert sorted(keys) == [BucketKey(2025, 52), BucketKey(2026, 1), BucketKey(2026, 2)]


def test_classify_open_item_has_no_closure_seconds():
    """Verify items without a close time produce no latency."""
    result = classify(_item(closed_at=None), NOW)

    assert result.closure_seconds is None


def test_classify_closed_item_reports_closure_seconds():
    """Verify latency is the close minus create difference in seconds."""
    created = NOW - timedelta(days=10)
    result = classify(_item(created_at=created, closed_at=created + timedelta(days=2)), NOW)

    assert result.closure_seconds == 172800.0


def test_classify_window_boundary_is_strict():
    """Verify 29 days ago is in the window and exactly 30 days ago is not."""
    inside = classify(_item(created_at=NOW - timedelta(days=29)), NOW, window_days=30)
    boundary = classify(_item(created_at=NOW - timedelta(days=30)), NOW, window_days=30)

    assert inside.in_window is True
    assert boundary.in_window is False


def test_classify_flags_bot_and_missing_authors():
    """Verify bot and anonymous authors are excluded from contributor tracking."""
    assert classify(_item(author="dependabot[bot]"), NOW).is_bot is True
    assert classify(_item(author=None), NOW).is_bot is True
    assert classify(_item(author="alice"), NOW).is_bot is False

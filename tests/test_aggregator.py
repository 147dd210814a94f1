"""Tests for metric accumulation across pull requests and issues."""

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from community_metrics.aggregator import MetricsAggregator
from community_metrics.models import BucketKey, WorkItem
from community_metrics.snapshot import build_snapshot

NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)
TWO_DAYS = timedelta(days=2)


def _work_item(
    author: str | None,
    days_ago: float,
    closed_after: timedelta | None = TWO_DAYS,
    is_pull_request: bool = True,
    item_id: int = 1,
) -> WorkItem:
    created_at = NOW - timedelta(days=days_ago)
    return WorkItem(
        id=item_id,
        author=author,
        created_at=created_at,
        closed_at=created_at + closed_after if closed_after is not None else None,
        is_pull_request=is_pull_request,
    )


def test_pulls_are_bucket_counted_including_bots():
    """Verify every pull increments its week, whoever authored it."""
    aggregator = MetricsAggregator(now=NOW)
    aggregator.add_pull(_work_item("alice", days_ago=3))
    aggregator.add_pull(_work_item("dependabot[bot]", days_ago=3))

    key = (NOW - timedelta(days=3)).isocalendar()[:2]
    assert aggregator.bucket_pull_counts == {BucketKey(*key): 2}


def test_issues_are_never_bucket_counted():
    """Verify issues contribute latency and contributors but no pull counts."""
    aggregator = MetricsAggregator(now=NOW)
    aggregator.add_issue(_work_item("alice", days_ago=3, is_pull_request=False))

    assert aggregator.bucket_pull_counts == {}
    assert aggregator.seconds_to_close_issues == [172800.0]
    assert aggregator.ledger.recent == {"alice"}


def test_out_of_window_latency_is_discarded():
    """Verify only in-window closed items contribute closure samples."""
    aggregator = MetricsAggregator(now=NOW)
    aggregator.add_pull(_work_item("alice", days_ago=40))
    aggregator.add_pull(_work_item("bob", days_ago=10))
    aggregator.add_pull(_work_item("carol", days_ago=5, closed_after=None))

    assert aggregator.seconds_to_close_pulls == [172800.0]


def test_bot_authors_never_reach_contributor_sets():
    """Verify bot-authored pulls are counted but not tracked as contributors."""
    aggregator = MetricsAggregator(now=NOW, bot_accounts=("snyk-bot",))
    aggregator.add_pull(_work_item("dependabot[bot]", days_ago=3))
    aggregator.add_pull(_work_item("snyk-bot", days_ago=50))
    aggregator.add_pull(_work_item(None, days_ago=4))

    assert sum(aggregator.bucket_pull_counts.values()) == 3
    assert aggregator.ledger.known == set()
    assert aggregator.ledger.recent == set()
    assert aggregator.ledger.bucket_new_contributors == {}
    assert len(aggregator.seconds_to_close_pulls) == 2


def test_author_is_new_in_one_bucket_across_pulls_and_issues():
    """Verify global first-seen attribution spans both item kinds."""
    aggregator = MetricsAggregator(now=NOW)
    aggregator.add_pull(_work_item("alice", days_ago=60))
    aggregator.add_issue(_work_item("alice", days_ago=3, is_pull_request=False))

    attributed = [
        key for key, names in aggregator.ledger.bucket_new_contributors.items() if "alice" in names
    ]
    assert len(attributed) == 1
    assert aggregator.ledger.new_contributor_counts() == [1, 0]


def test_end_to_end_two_closed_pulls_inside_and_outside_window():
    """Verify the 10 and 40 day old pulls split into new and established contributors."""
    aggregator = MetricsAggregator(now=NOW)
    aggregator.add_pull(_work_item("old-timer", days_ago=40, item_id=1))
    aggregator.add_pull(_work_item("newcomer", days_ago=10, item_id=2))

    snapshot = build_snapshot(aggregator, adopters=[])

    assert snapshot.mean_seconds_to_close_pulls == 172800.0
    assert snapshot.p50_seconds_to_close_pulls == 172800.0
    assert snapshot.number_of_pull_request_new == 1
    assert snapshot.names_of_contributors == ["old-timer"]
    assert snapshot.names_of_contributors_new == ["newcomer"]
    assert snapshot.p50_seconds_to_close_issues is None
    assert snapshot.mean_seconds_to_close_issues is None
    assert snapshot.mean_number_of_new_pulls_per_week == 1.0
    assert snapshot.mean_number_of_new_contributors_per_week == 1.0


def test_first_contribution_is_logged_once_per_author(caplog):
    """Verify only the item that attributes an author to a week is logged."""
    aggregator = MetricsAggregator(now=NOW)

    with caplog.at_level(logging.DEBUG, logger="community_metrics.aggregator"):
        aggregator.add_pull(_work_item("alice", days_ago=3, item_id=1))
        aggregator.add_issue(_work_item("alice", days_ago=3, is_pull_request=False, item_id=2))
        aggregator.add_pull(_work_item("snyk-bot", days_ago=3, item_id=3))

    attributed = [record for record in caplog.records if record.message == "First contribution attributed"]
    assert [record.item_id for record in attributed] == [1]
    assert attributed[0].author == "alice"

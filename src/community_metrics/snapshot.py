"""Snapshot construction, serialization and persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .aggregator import MetricsAggregator
from .config import COMMIT_MESSAGE, COMMITTER_EMAIL, COMMITTER_NAME, Config
from .errors import ConfigurationError
from .github_client import GitHubClient
from .models import MetricsSnapshot
from .stats import summarize

logger = logging.getLogger(__name__)

# Serialized key order of the published metrics file.
_JSON_KEYS = (
    ("namesOfAdopters", "names_of_adopters"),
    ("namesOfContributors", "names_of_contributors"),
    ("namesOfContributorsNew", "names_of_contributors_new"),
    ("numberOfPullRequestNew", "number_of_pull_request_new"),
    ("p50NumberOfNewPullsPerWeek", "p50_number_of_new_pulls_per_week"),
    ("p50NumberOfNewContributorsPerWeek", "p50_number_of_new_contributors_per_week"),
    ("p50SecondsToClosePulls", "p50_seconds_to_close_pulls"),
    ("p50SecondsToCloseIssues", "p50_seconds_to_close_issues"),
    ("meanNumberOfNewPullsPerWeek", "mean_number_of_new_pulls_per_week"),
    ("meanNumberOfNewContributorsPerWeek", "mean_number_of_new_contributors_per_week"),
    ("meanSecondsToClosePulls", "mean_seconds_to_close_pulls"),
    ("meanSecondsToCloseIssues", "mean_seconds_to_close_issues"),
)


def build_snapshot(aggregator: MetricsAggregator, adopters: Optional[List[str]] = None) -> MetricsSnapshot:
    """Finalize the contributor ledger and reduce all samples to a snapshot."""
    aggregator.ledger.finalize()

    pulls_to_close = summarize(aggregator.seconds_to_close_pulls)
    issues_to_close = summarize(aggregator.seconds_to_close_issues)
    pulls_per_week = summarize(aggregator.pull_counts())
    contributors_per_week = summarize(aggregator.ledger.new_contributor_counts())

    return MetricsSnapshot(
        names_of_adopters=list(adopters or []),
        names_of_contributors=sorted(aggregator.ledger.known),
        names_of_contributors_new=sorted(aggregator.ledger.recent),
        number_of_pull_request_new=pulls_to_close.count,
        p50_number_of_new_pulls_per_week=pulls_per_week.p50,
        p50_number_of_new_contributors_per_week=contributors_per_week.p50,
        p50_seconds_to_close_pulls=pulls_to_close.p50,
        p50_seconds_to_close_issues=issues_to_close.p50,
        mean_number_of_new_pulls_per_week=pulls_per_week.mean,
        mean_number_of_new_contributors_per_week=contributors_per_week.mean,
        mean_seconds_to_close_pulls=pulls_to_close.mean,
        mean_seconds_to_close_issues=issues_to_close.mean,
    )


def snapshot_to_dict(snapshot: MetricsSnapshot) -> Dict[str, Any]:
    """Map a snapshot onto the camelCase keys of the published file."""
    return {json_key: getattr(snapshot, attribute) for json_key, attribute in _JSON_KEYS}


def snapshot_to_json(snapshot: MetricsSnapshot) -> str:
    """Serialize a snapshot; undefined statistics become ``null``."""
    return json.dumps(snapshot_to_dict(snapshot), indent=2) + "\n"


def write_snapshot_file(content: str, path: str) -> Path:
    """Overwrite the local snapshot file with serialized content."""
    target = Path(path)
    if target.parent != Path("."):
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.info("Wrote metrics snapshot", extra={"path": str(target)})
    return target


def commit_snapshot(client: GitHubClient, config: Config, content: str) -> str:
    """Commit the snapshot to the home repository guarded by the current file sha.

    Raises:
        PersistenceConflictError: If the file changed between read and write.
        ApiError: If either GitHub request fails.
    """
    version_token = client.read_current_version(
        config.home_owner, config.home_repo, config.metric_path
    )
    sha = client.write_snapshot(
        config.home_owner,
        config.home_repo,
        config.metric_path,
        content,
        version_token=version_token,
        message=COMMIT_MESSAGE,
        committer={"name": COMMITTER_NAME, "email": COMMITTER_EMAIL},
    )
    logger.info(
        "Committed metrics snapshot",
        extra={
            "repository": f"{config.home_owner}/{config.home_repo}",
            "path": config.metric_path,
            "sha": sha,
        },
    )
    return sha


def read_snapshot_file(path: str) -> str:
    """Read a previously written local snapshot for a commit-only run.

    Raises:
        ConfigurationError: If the file does not exist or is not valid JSON.
    """
    target = Path(path)
    try:
        content = target.read_text(encoding="utf-8")
        json.loads(content)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"No snapshot found at '{target}' to commit.") from exc
    except ValueError as exc:
        raise ConfigurationError(f"Snapshot at '{target}' is not valid JSON.") from exc
    return content

"""Domain models for GitHub community metrics processing.

These dataclasses intentionally model only the subset of API payload fields that
are required for metric computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, NamedTuple, Optional


@dataclass(slots=True)
class Repository:
    """Represents a repository returned by the organization listing."""

    name: str


@dataclass(frozen=True, slots=True)
class WorkItem:
    """A pull request or issue, unified to the fields metrics need."""

    id: int
    author: Optional[str]
    created_at: datetime
    closed_at: Optional[datetime]
    is_pull_request: bool


class BucketKey(NamedTuple):
    """ISO calendar week a work item was created in."""

    iso_year: int
    iso_week: int


@dataclass(frozen=True, slots=True)
class Classification:
    """Per-item facts derived by the classifier."""

    bucket_key: BucketKey
    closure_seconds: Optional[float]
    in_window: bool
    is_bot: bool


@dataclass(frozen=True)
class MetricsSnapshot:
    """Final metrics written once per run, replacing any previous snapshot."""

    names_of_adopters: List[str] = field(default_factory=list)
    names_of_contributors: List[str] = field(default_factory=list)
    names_of_contributors_new: List[str] = field(default_factory=list)
    number_of_pull_request_new: int = 0
    p50_number_of_new_pulls_per_week: Optional[float] = None
    p50_number_of_new_contributors_per_week: Optional[float] = None
    p50_seconds_to_close_pulls: Optional[float] = None
    p50_seconds_to_close_issues: Optional[float] = None
    mean_number_of_new_pulls_per_week: Optional[float] = None
    mean_number_of_new_contributors_per_week: Optional[float] = None
    mean_seconds_to_close_pulls: Optional[float] = None
    mean_seconds_to_close_issues: Optional[float] = None

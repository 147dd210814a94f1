"""Statistics and formatting helpers for community metrics reporting.

This module provides utilities for:
- Computing linear-interpolation percentiles from pre-sorted samples.
- Computing arithmetic means that stay undefined for empty samples.
- Summarizing sample collections as P50, mean and count.
- Formatting second-based durations as ``HH:MM:SS``.
- Building a human-readable report for a metrics snapshot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .models import MetricsSnapshot


@dataclass(frozen=True, slots=True)
class SampleSummary:
    """P50 and mean of a sample collection; both ``None`` when it is empty."""

    p50: Optional[float]
    mean: Optional[float]
    count: int


def calculate_percentile(sorted_values: List[float], p: float) -> Optional[float]:
    """Return the ``p``-th percentile of closure latencies or weekly counts.

    Ranks are interpolated linearly (NumPy's default method), so the median of
    an even-sized sample is the midpoint of its two middle values. An empty
    sample has no percentile and yields ``None``, never ``0``.

    ``sorted_values`` must already be in ascending order; ``p`` must lie in
    ``[0, 100]`` or ``ValueError`` is raised.
    """
    if not 0 <= p <= 100:
        raise ValueError("Percentile 'p' must be in the range [0, 100].")

    if not sorted_values:
        return None

    if p <= 0:
        return float(sorted_values[0])

    if p >= 100:
        return float(sorted_values[-1])

    position = (len(sorted_values) - 1) * (p / 100.0)
    lower_index = math.floor(position)
    upper_index = math.ceil(position)

    if lower_index == upper_index:
        return float(sorted_values[int(position)])

    lower_value = sorted_values[lower_index]
    upper_value = sorted_values[upper_index]
    return float(lower_value + (upper_value - lower_value) * (position - lower_index))


def calculate_mean(values: List[float]) -> Optional[float]:
    """Arithmetic mean, or ``None`` for an empty sample rather than zero."""
    if not values:
        return None
    return math.fsum(values) / len(values)


def summarize(samples: Iterable[Optional[float]]) -> SampleSummary:
    """Compute P50, mean and count for a sample collection.

    Samples are sorted internally. ``None``, NaN and negative values are
    ignored so that a single malformed timestamp pair cannot skew a summary.
    """
    clean_samples = sorted(
        float(sample)
        for sample in samples
        if sample is not None and not math.isnan(sample) and sample >= 0
    )

    return SampleSummary(
        p50=calculate_percentile(clean_samples, 50),
        mean=calculate_mean(clean_samples),
        count=len(clean_samples),
    )


def format_duration(seconds: Optional[float]) -> str:
    """Format seconds as ``HH:MM:SS``.

    Args:
        seconds: Duration in seconds.

    Returns:
        ``"n/a"`` when ``seconds`` is ``None``; otherwise a rounded
        ``HH:MM:SS`` string.
    """
    if seconds is None:
        return "n/a"

    total_seconds = int(round(seconds))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    remaining_seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{remaining_seconds:02d}"


def _format_count(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return f"{value:.2f}"


def generate_report(snapshot: MetricsSnapshot) -> str:
    """Generate a human-readable summary of a metrics snapshot.

    Durations are formatted using :func:`format_duration`; weekly counts are
    shown with two decimals.
    """
    lines = [
        "Community Metrics Report",
        "",
        "1) Contributors",
        f"   Established: {len(snapshot.names_of_contributors)}",
        f"   New (last 30 days): {len(snapshot.names_of_contributors_new)}",
        f"   Adopters: {len(snapshot.names_of_adopters)}",
        "",
        "2) Weekly Activity",
        f"   New pulls per week P50: {_format_count(snapshot.p50_number_of_new_pulls_per_week)}",
        f"   New pulls per week mean: {_format_count(snapshot.mean_number_of_new_pulls_per_week)}",
        "   New contributors per week P50: "
        f"{_format_count(snapshot.p50_number_of_new_contributors_per_week)}",
        "   New contributors per week mean: "
        f"{_format_count(snapshot.mean_number_of_new_contributors_per_week)}",
        "",
        "3) Time to Close (last 30 days)",
        f"   Pull requests closed: {snapshot.number_of_pull_request_new}",
        f"   Pulls P50: {format_duration(snapshot.p50_seconds_to_close_pulls)}",
        f"   Pulls mean: {format_duration(snapshot.mean_seconds_to_close_pulls)}",
        f"   Issues P50: {format_duration(snapshot.p50_seconds_to_close_issues)}",
        f"   Issues mean: {format_duration(snapshot.mean_seconds_to_close_issues)}",
    ]

    return "\n".join(lines)

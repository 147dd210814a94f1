"""Command-line argument parsing for the community metrics generator."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import (
    DEFAULT_ADOPTER_URL,
    DEFAULT_HOME_REPOSITORY,
    DEFAULT_METRIC_PATH,
    DEFAULT_ORGANIZATION,
)


def _non_empty(value: str) -> str:
    """Parse and validate a non-empty CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is blank.
    """
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value.strip()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for metrics generation.

    Returns:
        Parsed CLI arguments holding the phase switches and the organization,
        home repository, output path and adopter URL overrides.
    """
    parser = argparse.ArgumentParser(
        prog="community-metrics",
        description=(
            "Generate community health metrics (pull request and issue "
            "throughput, time to close, contributors, adopters) for a GitHub "
            "organization and store them as a JSON snapshot."
        ),
    )

    parser.add_argument(
        "--with-metrics",
        action="store_true",
        help="Collect pull request and issue metrics for every repository.",
    )
    parser.add_argument(
        "--with-adopter-list",
        action="store_true",
        help="Fetch the adopter list.",
    )
    parser.add_argument(
        "--commit-changes",
        action="store_true",
        help="Commit the snapshot back to the home repository (default: dry run).",
    )
    parser.add_argument(
        "--commit-only",
        action="store_true",
        help="Skip collection and commit the existing local snapshot file.",
    )
    parser.add_argument(
        "--with-subset",
        action="store_true",
        help="Read only the first page of pull requests and issues per repository.",
    )
    parser.add_argument(
        "--org",
        type=_non_empty,
        default=DEFAULT_ORGANIZATION,
        help=f"GitHub organization to analyze (default: {DEFAULT_ORGANIZATION}).",
    )
    parser.add_argument(
        "--home-repo",
        type=_non_empty,
        default=DEFAULT_HOME_REPOSITORY,
        help=f"owner/name of the repository receiving the snapshot (default: {DEFAULT_HOME_REPOSITORY}).",
    )
    parser.add_argument(
        "--output",
        type=_non_empty,
        default=DEFAULT_METRIC_PATH,
        help=f"Snapshot file path (default: {DEFAULT_METRIC_PATH}).",
    )
    parser.add_argument(
        "--adopter-url",
        type=_non_empty,
        default=DEFAULT_ADOPTER_URL,
        help="URL of the YAML document listing adopters.",
    )
    parser.add_argument(
        "--bot-account",
        action="append",
        default=[],
        help="Additional automation account to exclude from contributors (repeatable).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)

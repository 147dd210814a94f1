"""Entry point and orchestration for the community metrics generator."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional, Sequence

from .adopters import fetch_adopter_list
from .aggregator import MetricsAggregator
from .cli import parse_args
from .collector import collect_organization_metrics
from .config import Config, load_config
from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    PersistenceConflictError,
)
from .github_client import GitHubClient
from .snapshot import (
    build_snapshot,
    commit_snapshot,
    read_snapshot_file,
    snapshot_to_json,
    write_snapshot_file,
)
from .stats import generate_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4
EXIT_PERSISTENCE_CONFLICT = 5


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def orchestrate_metrics_generation(argv: Optional[Sequence[str]] = None) -> int:
    """Run the configured phases and map failures to distinct exit codes.

    Phases run in a fixed order: metrics collection, adopter fetch, local
    snapshot write, then the optional commit. A failure during collection
    aborts before any snapshot is written; a commit failure leaves the local
    snapshot in place so the commit can be repeated without recomputation.
    """
    try:
        args = parse_args(argv)
        _configure_logging(args.verbose)

        config = load_config(
            organization=args.org,
            home_repository=args.home_repo,
            metric_path=args.output,
            adopter_url=args.adopter_url,
            bot_accounts=args.bot_account,
        )
    except AuthenticationError as exc:
        print(f"ERROR: Missing credential: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION
    except ConfigurationError as exc:
        print(f"ERROR: Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: Unexpected failure: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED

    commit = args.commit_changes or args.commit_only
    if not commit:
        logger.warning("Running in dry-run mode, no metrics will be committed back")

    client = GitHubClient(config=config)

    if args.commit_only:
        try:
            content = read_snapshot_file(config.metric_path)
        except ConfigurationError as exc:
            print(f"ERROR: Invalid configuration: {exc}", file=sys.stderr)
            return EXIT_CONFIGURATION
        return _commit(client, config, content)

    try:
        aggregator = MetricsAggregator(
            window_days=config.window_days,
            bot_accounts=config.bot_accounts,
        )

        if args.with_metrics:
            collect_organization_metrics(
                client,
                aggregator,
                org=config.organization,
                subset=args.with_subset,
            )

        adopters: List[str] = []
        if args.with_adopter_list:
            adopters = fetch_adopter_list(config.adopter_url)

        snapshot = build_snapshot(aggregator, adopters)
        content = snapshot_to_json(snapshot)
        write_snapshot_file(content, config.metric_path)
        print(generate_report(snapshot))
    except ApiError as exc:
        print(f"ERROR: Provider fetch failed: {exc}", file=sys.stderr)
        return EXIT_API
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: Unexpected failure: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED

    if not commit:
        return EXIT_OK

    return _commit(client, config, content)


def _commit(client: GitHubClient, config: Config, content: str) -> int:
    try:
        commit_snapshot(client, config, content)
    except PersistenceConflictError as exc:
        print(
            f"ERROR: Persistence conflict: {exc}. Metrics were computed and written to "
            f"'{config.metric_path}'; re-run with --commit-only to publish them.",
            file=sys.stderr,
        )
        return EXIT_PERSISTENCE_CONFLICT
    except ApiError as exc:
        print(f"ERROR: Snapshot commit failed: {exc}", file=sys.stderr)
        return EXIT_API

    return EXIT_OK


def main() -> None:
    """Console script entry point."""
    raise SystemExit(orchestrate_metrics_generation())


if __name__ == "__main__":
    main()

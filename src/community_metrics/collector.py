"""Collection loop feeding GitHub pull requests and issues into the aggregator.

Repositories are processed one at a time: all pull request pages of a
repository are consumed before its issue pages, and both before the next
repository. In subset mode only the first page of each pull request and
issue pagination is read; the repository listing is always read in full.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Tuple, TypeVar

from .aggregator import MetricsAggregator
from .github_client import GitHubClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


def limit_pages(pages: Iterator[List[T]], subset: bool) -> Iterable[List[T]]:
    """Pass pages through, stopping after the first one in subset mode.

    The source is never advanced past the first page when ``subset`` is set,
    so no further page is requested.
    """
    for page in pages:
        yield page
        if subset:
            return


def collect_repository_metrics(
    client: GitHubClient,
    aggregator: MetricsAggregator,
    owner: str,
    repo_name: str,
    subset: bool = False,
) -> Tuple[int, int]:
    """Fold the closed pull requests and issues of one repository into ``aggregator``.

    Returns:
        ``(pull_request_count, issue_count)`` of items processed.
    """
    pull_request_count = 0
    for pulls in limit_pages(client.iter_work_item_pages(owner, repo_name, "pulls"), subset):
        for pull in pulls:
            pull_request_count += 1
            aggregator.add_pull(pull)

    logger.info("%s: %d pull requests found", repo_name, pull_request_count)

    issue_count = 0
    for issues in limit_pages(client.iter_work_item_pages(owner, repo_name, "issues"), subset):
        for issue in issues:
            if issue.is_pull_request:
                continue
            issue_count += 1
            aggregator.add_issue(issue)

    logger.info("%s: %d issues found", repo_name, issue_count)

    return pull_request_count, issue_count


def collect_organization_metrics(
    client: GitHubClient,
    aggregator: MetricsAggregator,
    org: str,
    subset: bool = False,
) -> int:
    """Collect metrics for every repository of an organization.

    Returns:
        Number of repositories processed.
    """
    repository_count = 0
    pulls_total = 0
    issues_total = 0

    for repositories in client.iter_repository_pages(org):
        for repository in repositories:
            pulls, issues = collect_repository_metrics(
                client,
                aggregator,
                owner=org,
                repo_name=repository.name,
                subset=subset,
            )
            repository_count += 1
            pulls_total += pulls
            issues_total += issues

    logger.info(
        "Collected organization metrics",
        extra={
            "org": org,
            "repositories": repository_count,
            "pull_requests": pulls_total,
            "issues": issues_total,
            "subset": subset,
        },
    )

    return repository_count

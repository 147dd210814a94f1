"""Configuration parsing and validation for the community metrics generator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .errors import AuthenticationError, ConfigurationError

DEFAULT_ORGANIZATION = "nf-core"
DEFAULT_HOME_REPOSITORY = "matthiaszepper/nf-core-statistics"
DEFAULT_METRIC_PATH = "metrics.json"
DEFAULT_ADOPTER_URL = (
    "https://github.com/nf-core/website/blob/main/src/config/contributors.yaml?raw=true"
)
DEFAULT_BOT_ACCOUNTS: Tuple[str, ...] = ("snyk-bot",)
WINDOW_DAYS = 30

COMMIT_MESSAGE = "Updated metrics"
COMMITTER_NAME = "nf-core Bot"
COMMITTER_EMAIL = "6963520+MatthiasZepper@users.noreply.github.com"


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the metrics generator."""

    organization: str
    home_owner: str
    home_repo: str
    metric_path: str
    adopter_url: str
    bot_accounts: Tuple[str, ...]
    token: str
    window_days: int = WINDOW_DAYS


def _split_home_repository(home_repository: str) -> Tuple[str, str]:
    owner, _, name = home_repository.strip().partition("/")
    if not owner or not name or "/" in name:
        raise ConfigurationError(
            f"Invalid value for 'home-repo': expected 'owner/name', got '{home_repository}'."
        )
    return owner, name


def _merge_bot_accounts(extra_accounts: Iterable[str]) -> Tuple[str, ...]:
    accounts = list(DEFAULT_BOT_ACCOUNTS)
    env_accounts = os.getenv("METRICS_BOT_ACCOUNTS", "")
    for account in [*extra_accounts, *env_accounts.split(",")]:
        account = account.strip()
        if account and account not in accounts:
            accounts.append(account)
    return tuple(accounts)


def load_config(
    organization: str = DEFAULT_ORGANIZATION,
    home_repository: str = DEFAULT_HOME_REPOSITORY,
    metric_path: str = DEFAULT_METRIC_PATH,
    adopter_url: str = DEFAULT_ADOPTER_URL,
    bot_accounts: Optional[Iterable[str]] = None,
) -> Config:
    """Build and validate application configuration.

    The token check happens first so a missing credential aborts the run
    before anything else is inspected or any client is created.

    Args:
        organization: GitHub organization whose repositories are analyzed.
        home_repository: ``owner/name`` of the repository receiving the snapshot.
        metric_path: Snapshot file path, locally and inside the home repository.
        adopter_url: URL of the YAML document listing adopters.
        bot_accounts: Additional automation accounts excluded from contributors.

    Returns:
        A validated ``Config`` instance.

    Raises:
        AuthenticationError: If ``GITHUB_TOKEN`` is not configured.
        ConfigurationError: If any other value is missing or malformed.
    """
    token: str = os.getenv("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthenticationError(
            "GITHUB_TOKEN is not set. Please provide a GitHub token "
            "before running the metrics generator."
        )

    if not organization or not organization.strip():
        raise ConfigurationError("Invalid value for 'org': expected a non-empty name.")
    if not metric_path or not metric_path.strip():
        raise ConfigurationError("Invalid value for 'output': expected a non-empty path.")

    home_owner, home_repo = _split_home_repository(home_repository)

    return Config(
        organization=organization.strip(),
        home_owner=home_owner,
        home_repo=home_repo,
        metric_path=metric_path.strip(),
        adopter_url=adopter_url,
        bot_accounts=_merge_bot_accounts(bot_accounts or ()),
        token=token,
    )

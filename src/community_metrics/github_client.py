"""GitHub REST API client for metrics data retrieval and snapshot persistence."""

from __future__ import annotations

import base64
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import requests

from .config import Config
from .errors import ApiError, PersistenceConflictError
from .models import Repository, WorkItem

WORK_ITEM_KINDS = ("pulls", "issues")
_SHA_MESSAGE = re.compile(r"\bsha\b", re.IGNORECASE)


class GitHubClient:
    """Small, typed client for the GitHub repository, pull and issue APIs.

    Requests are not retried: a failed page aborts the pagination and the
    error is left to the caller.
    """

    _BASE_URL = "https://api.github.com"
    _PAGE_SIZE = 100

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including the token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._BASE_URL}/{path.lstrip('/')}"

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Execute a single GET request.

        Raises:
            ApiError: If the transport fails or the response is HTTP >= 400.
        """
        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise ApiError(f"GitHub request failed: GET {url}") from exc

        if response.status_code >= 400:
            raise ApiError(
                "GitHub API request failed: "
                f"GET {url} returned {response.status_code} - {response.text}"
            )

        return response

    def iter_pages(self, path: str, params: Optional[Dict[str, Any]] = None) -> Iterator[List[Any]]:
        """Lazily yield each page of a paginated collection endpoint.

        The next page is requested only when the consumer asks for it, so
        stopping iteration early performs no further requests. Pagination ends
        when the response carries no ``rel="next"`` link.

        Raises:
            ApiError: If a page cannot be fetched or is not a JSON list.
        """
        url: Optional[str] = self._build_url(path)
        query: Optional[Dict[str, Any]] = dict(params or {})

        while url:
            response = self._get(url, params=query)

            try:
                payload = response.json()
            except ValueError as exc:
                raise ApiError(f"GitHub API returned invalid JSON: GET {url}") from exc

            if not isinstance(payload, list):
                raise ApiError(f"GitHub API returned unexpected payload shape: GET {url}")

            yield payload

            # The next link already carries every query parameter.
            url = response.links.get("next", {}).get("url")
            query = None

    def iter_repository_pages(self, org: str) -> Iterator[List[Repository]]:
        """Yield pages of repositories belonging to an organization."""
        for page in self.iter_pages(f"orgs/{org}/repos", params={"per_page": self._PAGE_SIZE}):
            yield [Repository(name=str(item["name"])) for item in page if item.get("name")]

    def iter_work_item_pages(
        self,
        owner: str,
        repo: str,
        kind: str,
        state: str = "closed",
        sort: str = "created",
        direction: str = "asc",
    ) -> Iterator[List[WorkItem]]:
        """Yield pages of pull requests or issues for one repository.

        ``kind`` selects the ``pulls`` or ``issues`` endpoint. The issues
        endpoint also returns pull requests; those are marked with
        ``is_pull_request=True`` so consumers can skip them.

        Raises:
            ValueError: If ``kind`` is not a known work item kind.
            ApiError: If a page cannot be fetched or an item has missing or
                malformed fields.
        """
        if kind not in WORK_ITEM_KINDS:
            raise ValueError(f"Unknown work item kind '{kind}', expected one of {WORK_ITEM_KINDS}.")

        params = {
            "state": state,
            "sort": sort,
            "direction": direction,
            "per_page": self._PAGE_SIZE,
        }
        path = f"repos/{owner}/{repo}/{kind}"

        for page in self.iter_pages(path, params=params):
            yield [self._to_work_item(item, kind, repo) for item in page]

    def _to_work_item(self, item: Dict[str, Any], kind: str, repo: str) -> WorkItem:
        try:
            item_id = item.get("id")
            created_at = self._parse_datetime(item.get("created_at"))
            if item_id is None or created_at is None:
                raise ApiError(
                    "GitHub work item payload is missing required fields: "
                    f"repo={repo}, kind={kind}, payload={item}"
                )

            user = item.get("user") or {}
            login = user.get("login")

            return WorkItem(
                id=int(item_id),
                author=str(login) if login else None,
                created_at=created_at,
                closed_at=self._parse_datetime(item.get("closed_at")),
                is_pull_request=kind == "pulls" or "pull_request" in item,
            )
        except (TypeError, ValueError) as exc:
            raise ApiError(
                "GitHub work item payload has malformed fields: "
                f"repo={repo}, kind={kind}, payload={item}"
            ) from exc

    def _is_version_conflict(self, response: requests.Response) -> bool:
        """Whether a contents write was rejected because of a stale or missing sha.

        409 always means the file moved on. 422 is also used for plain
        validation failures, so it only counts when the message is about the sha.
        """
        if response.status_code == 409:
            return True
        if response.status_code != 422:
            return False

        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = payload.get("message") if isinstance(payload, dict) else None
        return _SHA_MESSAGE.search(str(message or response.text)) is not None

    def read_current_version(self, owner: str, repo: str, path: str) -> Optional[str]:
        """Return the blob sha of a repository file, or ``None`` if it does not exist.

        Raises:
            ApiError: If the lookup fails for any reason other than a missing file.
        """
        url = self._build_url(f"repos/{owner}/{repo}/contents/{path}")
        try:
            response = self._session.get(url, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise ApiError(f"GitHub request failed: GET {url}") from exc

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise ApiError(
                "GitHub API request failed: "
                f"GET {url} returned {response.status_code} - {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned invalid JSON: GET {url}") from exc

        sha = payload.get("sha") if isinstance(payload, dict) else None
        if not sha:
            raise ApiError(f"GitHub API returned no file sha: GET {url}")
        return str(sha)

    def write_snapshot(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        version_token: Optional[str],
        message: str,
        committer: Dict[str, str],
    ) -> str:
        """Create or update a repository file guarded by its previous blob sha.

        Returns:
            The sha of the newly written blob.

        Raises:
            PersistenceConflictError: If ``version_token`` is stale.
            ApiError: If the request fails for any other reason.
        """
        url = self._build_url(f"repos/{owner}/{repo}/contents/{path}")
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "committer": committer,
        }
        if version_token:
            body["sha"] = version_token

        try:
            response = self._session.put(url, json=body, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise ApiError(f"GitHub request failed: PUT {url}") from exc

        if self._is_version_conflict(response):
            raise PersistenceConflictError(
                f"Snapshot '{path}' in {owner}/{repo} changed since version "
                f"{version_token or '<none>'} was read: {response.text}"
            )
        if response.status_code >= 400:
            raise ApiError(
                "GitHub API request failed: "
                f"PUT {url} returned {response.status_code} - {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned invalid JSON: PUT {url}") from exc

        content_info = payload.get("content") if isinstance(payload, dict) else None
        return str((content_info or {}).get("sha", ""))

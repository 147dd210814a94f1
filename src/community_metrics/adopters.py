"""Adopter list retrieval from the published contributors YAML document."""

from __future__ import annotations

import logging
from typing import List, Optional

import requests
import yaml

from .errors import AdopterListError

logger = logging.getLogger(__name__)


def parse_adopter_names(content: str) -> List[str]:
    """Extract the sorted, de-duplicated ``full_name`` values of all adopters.

    The document is expected to hold a top-level ``contributors`` list whose
    entries are mappings with a ``full_name`` key; entries without one are
    skipped.

    Raises:
        AdopterListError: If the content is not YAML or has an unexpected shape.
    """
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise AdopterListError(f"Adopter document is not valid YAML: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("contributors"), list):
        raise AdopterListError("Adopter document has no 'contributors' list.")

    names = set()
    for record in document["contributors"]:
        if not isinstance(record, dict) or not record.get("full_name"):
            logger.debug("Skipping adopter record without full_name", extra={"record": record})
            continue
        names.add(str(record["full_name"]))

    return sorted(names)


def fetch_adopter_list(
    url: str,
    session: Optional[requests.Session] = None,
    timeout_seconds: int = 30,
) -> List[str]:
    """Fetch and parse the adopter list, degrading to an empty list on failure.

    Any network, HTTP or parse failure is logged and yields ``[]`` so the
    metrics run can continue. A session created here is closed afterwards;
    a caller-provided one is left open.
    """
    if session is None:
        with requests.Session() as own_session:
            return _fetch_adopter_list(own_session, url, timeout_seconds)
    return _fetch_adopter_list(session, url, timeout_seconds)


def _fetch_adopter_list(http: requests.Session, url: str, timeout_seconds: int) -> List[str]:
    try:
        response = http.get(url, timeout=timeout_seconds)
        response.raise_for_status()
        adopters = parse_adopter_names(response.text)
    except (requests.RequestException, AdopterListError) as exc:
        logger.warning(
            "Adopter list unavailable (continuing): %s",
            exc,
            extra={"adopter_url": url},
        )
        return []

    logger.info("Fetched adopter list", extra={"adopters": len(adopters)})
    return adopters

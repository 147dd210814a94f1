"""Tests for adopter list fetching and parsing."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from community_metrics.adopters import fetch_adopter_list, parse_adopter_names
from community_metrics.errors import AdopterListError

ADOPTERS_YAML = """
contributors:
  - full_name: Zebra Institute
    short_name: ZI
  - full_name: Alpha University
    affiliation: Alpha
  - full_name: Zebra Institute
  - short_name: nameless
"""


def _session(text: str = "", status_error: Exception | None = None, get_error: Exception | None = None):
    response = Mock()
    response.text = text
    response.raise_for_status = Mock(side_effect=status_error)
    session = Mock()
    session.get = Mock(return_value=response, side_effect=get_error)
    return session


def test_parse_adopter_names_dedupes_and_sorts():
    """Verify adopter names are unique and alphabetically sorted."""
    assert parse_adopter_names(ADOPTERS_YAML) == ["Alpha University", "Zebra Institute"]


def test_parse_adopter_names_rejects_invalid_yaml():
    """Verify syntactically broken YAML raises AdopterListError."""
    with pytest.raises(AdopterListError):
        parse_adopter_names("contributors: [unclosed")


def test_parse_adopter_names_rejects_missing_contributors_list():
    """Verify documents without a contributors list raise AdopterListError."""
    with pytest.raises(AdopterListError):
        parse_adopter_names("<html>not yaml data</html>")


def test_fetch_adopter_list_returns_parsed_names():
    """Verify a successful fetch returns the parsed adopter names."""
    session = _session(text=ADOPTERS_YAML)

    adopters = fetch_adopter_list("https://example.test/adopters.yaml", session=session)

    assert adopters == ["Alpha University", "Zebra Institute"]
    session.get.assert_called_once_with("https://example.test/adopters.yaml", timeout=30)


def test_fetch_adopter_list_malformed_content_degrades_to_empty_list():
    """Verify parse failures are logged and produce an empty list."""
    session = _session(text="contributors: {not: a list}")

    assert fetch_adopter_list("https://example.test/adopters.yaml", session=session) == []


def test_fetch_adopter_list_network_error_degrades_to_empty_list():
    """Verify network failures are logged and produce an empty list."""
    session = _session(get_error=requests.ConnectionError("offline"))

    assert fetch_adopter_list("https://example.test/adopters.yaml", session=session) == []


def test_fetch_adopter_list_http_error_degrades_to_empty_list():
    """Verify HTTP error statuses produce an empty list."""
    session = _session(status_error=requests.HTTPError("404"))

    assert fetch_adopter_list("https://example.test/adopters.yaml", session=session) == []


def test_fetch_adopter_list_closes_the_session_it_creates():
    """Verify a session opened for the fetch is closed afterwards."""
    session = MagicMock()
    session.__enter__.return_value = session
    session.get.return_value.text = ADOPTERS_YAML

    with patch("community_metrics.adopters.requests.Session", return_value=session):
        adopters = fetch_adopter_list("https://example.test/adopters.yaml")

    assert adopters == ["Alpha University", "Zebra Institute"]
    session.__exit__.assert_called_once()

"""
Unit tests for the user-friendly error handler.
"""

from sitescrape_core.error_handler import (
    create_error_response,
    format_error_for_logging,
    format_user_friendly_error,
    get_error_category,
    should_retry_error,
)
from sitescrape_core.errors import (
    CollaboratorMissing,
    FetchFailed,
    NoResultsFound,
    SchemaNotFound,
    UnknownSite,
)


def test_resolution_error_lists_available_sites():
    error = UnknownSite('No schema found for "Springer".', ["Google Scholar", "DBLP"])
    result = format_user_friendly_error(error)
    assert result["message"] == 'No schema found for "Springer". Available sites: Google Scholar, DBLP.'
    assert "available site names" in result["suggestion"]
    assert result["severity"] == "warning"
    assert result["can_retry"] is False


def test_resolution_error_without_alternatives():
    error = SchemaNotFound('No schema named "X".')
    assert error.available == []
    assert str(error) == 'No schema named "X".'


def test_fetch_failure_is_retryable():
    error = FetchFailed("HTTP 503: Service Unavailable")
    assert should_retry_error(error) is True
    assert get_error_category(error) == "network"
    assert format_user_friendly_error(error)["message"] == "HTTP 503: Service Unavailable"


def test_unknown_error_fallback():
    result = format_user_friendly_error(RuntimeError("Some random error"))
    assert result["message"] == "An unexpected error occurred"
    assert "RuntimeError" in result["technical"]
    assert result["can_retry"] is True
    assert get_error_category(RuntimeError("x")) == "unknown"


def test_format_error_for_logging():
    text = format_error_for_logging(NoResultsFound("No results found"), context="search")
    lines = text.split("\n")
    assert lines[0] == "NoResultsFound [schema/warning] during search:"
    assert lines[1] == "  No results found"
    assert lines[2].startswith("  -> ")
    assert len(lines) == 3


def test_format_unmapped_error_for_logging():
    lines = format_error_for_logging(RuntimeError("Timeout 30000ms exceeded")).split("\n")
    assert lines[0] == "RuntimeError [unknown/error]:"
    assert "  RuntimeError: Timeout 30000ms exceeded" in lines
    assert lines[-1] == "  (retrying may help)"


def test_create_error_response():
    response = create_error_response(CollaboratorMissing("No command parser configured."))
    assert response["success"] is False
    assert "context" not in response
    assert response["error"]["type"] == "CollaboratorMissing"
    assert response["error"]["category"] == "config"
    assert response["error"]["severity"] == "critical"
    assert "sitescrape config set" in response["error"]["suggestion"]
    assert "available" not in response["error"]


def test_create_error_response_lists_available_sites():
    error = UnknownSite('No schema found for "Springer".', ["Google Scholar", "DBLP"])
    response = create_error_response(error, context="search")
    assert response["context"] == "search"
    assert response["error"]["category"] == "lookup"
    assert response["error"]["available"] == ["Google Scholar", "DBLP"]

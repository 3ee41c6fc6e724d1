"""
User-Friendly Error Handler.

Converts sitescrape errors into messages with actionable suggestions for
the CLI and any other front end. Nothing here retries; can_retry is only a
hint for the user.
"""

from typing import Dict, Optional, Type
import logging

from .errors import (
    CollaboratorMissing,
    CommandNotUnderstood,
    FetchFailed,
    LLMError,
    MissingParameter,
    NoActivePage,
    NoResultsFound,
    NoSchemaForPage,
    NoSearchUrl,
    PageTooSmall,
    SchemaInferenceFailed,
    SchemaInvalid,
    SchemaNotFound,
    SelectorError,
    StorageError,
    UnknownCommand,
    UnknownSite,
    UnsupportedPage,
)

logger = logging.getLogger(__name__)


# Error mappings: exception type -> user-friendly info
ERROR_MAPPINGS: Dict[Type[Exception], Dict] = {
    SchemaInvalid: {
        "suggestion": "Open a results page of the site and create the schema again",
        "severity": "error",
        "category": "schema",
        "can_retry": False,
    },
    NoResultsFound: {
        "suggestion": "Check that the page shows results; the site layout may have changed, recreate the schema",
        "severity": "warning",
        "category": "schema",
        "can_retry": False,
    },
    NoSchemaForPage: {
        "suggestion": "Create a schema on a results page of this site first",
        "severity": "warning",
        "category": "lookup",
        "can_retry": False,
    },
    UnknownSite: {
        "suggestion": "Use one of the available site names or create a schema for the site",
        "severity": "warning",
        "category": "lookup",
        "can_retry": False,
    },
    SchemaNotFound: {
        "suggestion": "Check the schema name against the list of saved sites",
        "severity": "warning",
        "category": "lookup",
        "can_retry": False,
    },
    NoSearchUrl: {
        "suggestion": "Recreate the schema from a search results page so the search URL is detected",
        "severity": "error",
        "category": "schema",
        "can_retry": False,
    },
    SchemaInferenceFailed: {
        "suggestion": "Make sure the page shows search results, then try again",
        "severity": "error",
        "category": "llm",
        "can_retry": True,
    },
    FetchFailed: {
        "suggestion": "Check the connection and that the site is reachable",
        "severity": "error",
        "category": "network",
        "can_retry": True,
    },
    LLMError: {
        "suggestion": "Check the provider configuration and API key",
        "severity": "error",
        "category": "llm",
        "can_retry": True,
    },
    MissingParameter: {
        "suggestion": "Rephrase the instruction including all the required details",
        "severity": "warning",
        "category": "command",
        "can_retry": False,
    },
    UnknownCommand: {
        "suggestion": "Rephrase the instruction",
        "severity": "warning",
        "category": "command",
        "can_retry": False,
    },
    CommandNotUnderstood: {
        "suggestion": "Rephrase the instruction",
        "severity": "warning",
        "category": "command",
        "can_retry": False,
    },
    PageTooSmall: {
        "suggestion": "Wait until the results have loaded and try again",
        "severity": "warning",
        "category": "page",
        "can_retry": True,
    },
    NoActivePage: {
        "suggestion": "Pass --url or --html to work on a page",
        "severity": "error",
        "category": "page",
        "can_retry": False,
    },
    UnsupportedPage: {
        "suggestion": "Open a regular web page",
        "severity": "error",
        "category": "page",
        "can_retry": False,
    },
    CollaboratorMissing: {
        "suggestion": "Configure an LLM provider: sitescrape config set <provider> --api-key <key>",
        "severity": "critical",
        "category": "config",
        "can_retry": False,
    },
    StorageError: {
        "suggestion": "Check permissions of the workspace directory (SITESCRAPE_WORKSPACE)",
        "severity": "critical",
        "category": "storage",
        "can_retry": False,
    },
    SelectorError: {
        "suggestion": "Recreate the schema; one of its selectors is not valid CSS",
        "severity": "error",
        "category": "schema",
        "can_retry": False,
    },
}


def _lookup(error: Exception) -> Optional[Dict]:
    for error_type in type(error).__mro__:
        if error_type in ERROR_MAPPINGS:
            return ERROR_MAPPINGS[error_type]
    return None


def format_user_friendly_error(
    error: Exception,
    context: str = "general",
    technical_details: Optional[str] = None
) -> Dict:
    """
    Convert an exception into user-facing information.

    Returns:
        {
            "message": str,          # The error's own message
            "suggestion": str,       # Actionable suggestion
            "technical": str,        # Technical details
            "severity": str,         # "critical", "error", "warning"
            "can_retry": bool        # Whether a retry might help
        }
    """
    mapped = _lookup(error)
    if mapped is None:
        logger.debug(f"Unmapped error in {context}: {error!r}")
        return {
            "message": "An unexpected error occurred",
            "suggestion": "Check the logs (SITESCRAPE_DEBUG=true) or try again",
            "technical": technical_details or f"{type(error).__name__}: {error}",
            "severity": "error",
            "can_retry": True,
        }
    return {
        "message": str(error),
        "suggestion": mapped["suggestion"],
        "technical": technical_details or type(error).__name__,
        "severity": mapped["severity"],
        "can_retry": mapped["can_retry"],
    }


def get_error_category(error: Exception) -> str:
    """
    Returns:
        "schema", "lookup", "network", "llm", "command", "page", "config",
        "storage" or "unknown"
    """
    mapped = _lookup(error)
    return mapped["category"] if mapped else "unknown"


def should_retry_error(error: Exception) -> bool:
    return format_user_friendly_error(error).get("can_retry", False)


def format_error_for_logging(error: Exception, context: str = "") -> str:
    """
    Multi-line description for the CLI log:

        SchemaNotFound [lookup/warning] during schemas:
          No schema named "X". Available sites: Google Scholar.
          -> Check the schema name against the list of saved sites
    """
    friendly = format_user_friendly_error(error, context)
    header = f"{type(error).__name__} [{get_error_category(error)}/{friendly['severity']}]"
    if context:
        header += f" during {context}"
    lines = [f"{header}:", f"  {friendly['message']}", f"  -> {friendly['suggestion']}"]
    if _lookup(error) is None:
        lines.append(f"  {friendly['technical']}")
    if friendly["can_retry"]:
        lines.append("  (retrying may help)")
    return "\n".join(lines)


def create_error_response(error: Exception, context: str = "") -> Dict:
    """JSON body the CLI prints for a failed command"""
    friendly = format_user_friendly_error(error, context)
    body = {
        "type": type(error).__name__,
        "message": friendly["message"],
        "suggestion": friendly["suggestion"],
        "severity": friendly["severity"],
        "category": get_error_category(error),
        "can_retry": friendly["can_retry"],
    }
    available = getattr(error, "available", None)
    if available:
        body["available"] = list(available)
    response = {"success": False, "error": body}
    if context:
        response["context"] = context
    return response

"""
Error taxonomy for sitescrape.

Every failure the core can surface is a ScrapeError subclass with a
descriptive message. Resolution misses (no schema for page, unknown site,
schema not found) also carry the list of known schema names.
"""

from typing import List, Optional


class ScrapeError(Exception):
    """Base class for all sitescrape errors"""


class SchemaInvalid(ScrapeError):
    """Schema is missing its result container selector (or it is malformed)"""


class NoResultsFound(ScrapeError):
    """Result container selector matched nothing in the document"""


class _ResolutionError(ScrapeError):
    """A lookup that failed; lists the alternatives the user can pick from"""

    def __init__(self, message: str, available: Optional[List[str]] = None):
        self.available = list(available or [])
        if self.available:
            message = f"{message} Available sites: {', '.join(self.available)}."
        super().__init__(message)


class NoSchemaForPage(_ResolutionError):
    pass


class UnknownSite(_ResolutionError):
    pass


class SchemaNotFound(_ResolutionError):
    pass


class NoSearchUrl(ScrapeError):
    """Schema has no search URL template"""


class SchemaInferenceFailed(ScrapeError):
    """LLM did not return a usable result container selector"""


class FetchFailed(ScrapeError):
    """Fetch collaborator reported an error; message is passed through"""


class MissingParameter(ScrapeError):
    pass


class UnknownCommand(ScrapeError):
    pass


class CommandNotUnderstood(ScrapeError):
    pass


class PageTooSmall(ScrapeError):
    pass


class NoActivePage(ScrapeError):
    pass


class UnsupportedPage(ScrapeError):
    pass


class CollaboratorMissing(ScrapeError):
    pass


class StorageError(ScrapeError):
    pass


class SelectorError(ScrapeError):
    """CSS selector could not be compiled"""


class LLMError(ScrapeError):
    pass

"""
sitescrape_core: schema-driven scraping of search result listings

Usage:
    from sitescrape_core import SchemaRepository, MemoryStore, scrape_from_html

    repo = SchemaRepository(MemoryStore())
    schema = await repo.get_by_name("Google Scholar")
    result = scrape_from_html(html, schema, query="iot", url=url)
"""
from .config import Config, config
from .commands import (
    ChangeColor,
    Command,
    CreateSchema,
    DeleteSchema,
    GetHeadings,
    ListSchemas,
    ScrapeCurrentPage,
    SearchSite,
    command_from_dict,
)
from .dispatcher import CommandDispatcher
from .dom import SoupDocument, parse_html
from .extraction import extract, extract_query_from_url, scrape_from_html
from .fetcher import FetchResult, PageFetcher
from .kv_store import JsonFileStore, MemoryStore
from .schema_repository import SchemaRepository, build_search_url
from .schema_types import ExtractedRecord, ExtractionResult, ScrapedAuthor, SiteSchema, SiteSelectors
from .simplifier import simplify_html

__all__ = [
    # Core
    "Config",
    "config",
    "SiteSchema",
    "SiteSelectors",
    "ScrapedAuthor",
    "ExtractedRecord",
    "ExtractionResult",
    "SchemaRepository",
    "build_search_url",
    "MemoryStore",
    "JsonFileStore",
    "SoupDocument",
    "parse_html",
    "simplify_html",
    "extract",
    "extract_query_from_url",
    "scrape_from_html",
    "FetchResult",
    "PageFetcher",
    # Commands
    "Command",
    "ChangeColor",
    "GetHeadings",
    "ScrapeCurrentPage",
    "SearchSite",
    "CreateSchema",
    "ListSchemas",
    "DeleteSchema",
    "command_from_dict",
    "CommandDispatcher",
]

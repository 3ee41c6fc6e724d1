"""
Command Dispatcher - single entry point that runs a typed Command.

    dispatcher = CommandDispatcher(repository, fetcher=PageFetcher(),
                                   inferrer=LLMSchemaInferrer(client), page=page)
    result = await dispatcher.dispatch(SearchSite(site="scholar", query="iot"))

Paths:
    scrape   - live page snapshot or fetched HTML -> extraction engine
    create   - live page -> simplifier -> LLM inference -> repository.save
    manage   - list / delete schemas
    page     - heading colour / heading listing, no schema involved

Every failure is raised as a ScrapeError with a message meant for the user.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .commands import (
    ChangeColor,
    Command,
    CreateSchema,
    DeleteSchema,
    GetHeadings,
    ListSchemas,
    ScrapeCurrentPage,
    SearchSite,
)
from .colors import resolve_color
from .errors import (
    CollaboratorMissing,
    CommandNotUnderstood,
    FetchFailed,
    MissingParameter,
    NoActivePage,
    NoSchemaForPage,
    NoSearchUrl,
    PageTooSmall,
    SchemaInferenceFailed,
    SchemaNotFound,
    SelectorError,
    UnknownCommand,
    UnknownSite,
    UnsupportedPage,
)
from .extraction import extract, extract_query_from_url, scrape_from_html
from .page import HEADING_TAGS, LivePage, is_special_page
from .schema_repository import SchemaRepository, build_search_url
from .schema_types import SiteSchema, SiteSelectors
from .simplifier import MIN_SIMPLIFIED_LENGTH, simplify_html

logger = logging.getLogger(__name__)


def site_name_from_url(url: str) -> str:
    """'https://www.dblp.uni-trier.de/x' -> 'Dblp Uni-trier'"""
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        hostname = ""
    if not hostname:
        return "Unknown site"
    if hostname.startswith("www."):
        hostname = hostname[4:]
    parts = hostname.split(".")
    if len(parts) >= 2:
        return " ".join(p[:1].upper() + p[1:] for p in parts[:-1])
    return hostname


def _origin(url: str) -> str:
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def schema_from_inference(raw: Dict[str, Any], page_url: str) -> SiteSchema:
    """Validate an inferred schema dict and fill the fields the LLM left out"""
    selectors = raw.get("selectors") if isinstance(raw, dict) else None
    if not isinstance(selectors, dict) or not _text(selectors.get("resultContainer")).strip():
        raise SchemaInferenceFailed(
            "The LLM could not identify the result structure of this page. "
            "Make sure you are on a page with visible search results."
        )
    semantic = raw.get("semantic_structure")
    params = raw.get("search_params")
    return SiteSchema(
        name=_text(raw.get("name")).strip() or site_name_from_url(page_url),
        origin_url=_text(raw.get("url")).strip() or _origin(page_url),
        domain_tag=_text(raw.get("domain")).strip() or "general",
        search_url_template=_text(raw.get("search_url")).strip(),
        search_param_names={str(k): _text(v) for k, v in params.items()} if isinstance(params, dict) else {},
        selectors=SiteSelectors.from_dict({k: _text(v).strip() for k, v in selectors.items()}),
        semantic_type=(
            _text(semantic.get("type")).strip() if isinstance(semantic, dict) else ""
        ) or "General",
    )


def _headings(document, tag: str) -> List[Dict[str, str]]:
    return [{"text": h.text.strip(), "html": h.inner_html} for h in document.select(tag)]


class CommandDispatcher:
    def __init__(
        self,
        repository: SchemaRepository,
        fetcher=None,
        inferrer=None,
        page: Optional[LivePage] = None,
        command_parser=None,
    ):
        self.repository = repository
        self.fetcher = fetcher
        self.inferrer = inferrer
        self.page = page
        self.command_parser = command_parser

    async def run_instruction(self, instruction: str) -> Dict[str, Any]:
        """Parse a natural-language instruction and dispatch it"""
        if self.command_parser is None:
            raise CollaboratorMissing("No command parser configured. Configure an LLM provider first.")
        command = await self.command_parser.parse(instruction)
        if command is None:
            raise CommandNotUnderstood(f"Could not understand the instruction: {instruction!r}")
        return await self.dispatch(command)

    async def dispatch(self, command: Command) -> Dict[str, Any]:
        logger.info(f"Dispatching {command}")
        if isinstance(command, ChangeColor):
            return await self.change_color(command.color)
        if isinstance(command, GetHeadings):
            return await self.get_headings()
        if isinstance(command, ScrapeCurrentPage):
            return await self.scrape_current_page()
        if isinstance(command, SearchSite):
            return await self.search_site(command.site, command.query)
        if isinstance(command, CreateSchema):
            return await self.create_schema()
        if isinstance(command, ListSchemas):
            return await self.list_schemas()
        if isinstance(command, DeleteSchema):
            return await self.delete_schema(command.name)
        raise UnknownCommand(f"Unknown command: {command!r}")

    def _require_page(self) -> LivePage:
        if self.page is None:
            raise NoActivePage("This command needs an open page.")
        if is_special_page(self.page.url):
            raise UnsupportedPage(f"Cannot work on special browser pages: {self.page.url or '(empty)'}")
        return self.page

    async def _available(self) -> List[str]:
        return await self.repository.site_names()

    # ---- page commands ----

    async def change_color(self, color: Optional[str]) -> Dict[str, Any]:
        page = self._require_page()
        value = resolve_color(color)
        updated = await page.set_heading_color(value)
        return {"action": "changeColor", "success": True, "color": value, "updated": updated}

    async def get_headings(self) -> Dict[str, Any]:
        page = self._require_page()
        document = await page.snapshot()
        result: Dict[str, Any] = {"action": "getTitles", "pageTitle": await page.get_title()}
        for tag in HEADING_TAGS:
            result[f"{tag}Titles"] = _headings(document, tag)
        result["url"] = page.url
        return result

    # ---- scrape path ----

    async def scrape_current_page(self) -> Dict[str, Any]:
        page = self._require_page()
        hostname = urlparse(page.url).hostname or ""
        schema = await self.repository.find_by_hostname(hostname)
        if schema is None:
            raise NoSchemaForPage(
                "There is no scraping schema for this page. "
                "Use \"create the schema\" on a results page to add one.",
                await self._available(),
            )
        query = extract_query_from_url(page.url, schema)
        document = await page.snapshot()
        return extract(document, schema, query, page.url).to_dict()

    async def search_site(self, site: str, query: str) -> Dict[str, Any]:
        site = (site or "").strip()
        query = query or ""
        if not site or not query.strip():
            raise MissingParameter('A site and a query are required, e.g. "search iot on Google Scholar".')

        schema = await self.repository.find_by_name(site)
        if schema is None:
            raise UnknownSite(
                f'No schema found for "{site}". '
                f'Open the site and use "create the schema" to add it.',
                await self._available(),
            )
        if not schema.supports_search:
            raise NoSearchUrl(
                f'Schema "{schema.name}" has no search URL. '
                f'Create it again from a results page of the site.'
            )
        if self.fetcher is None:
            raise CollaboratorMissing("No page fetcher configured.")

        search_url = build_search_url(schema, query)
        logger.info(f"Searching {schema.name}: {search_url}")
        response = await self.fetcher.fetch(search_url)
        if not response.success:
            raise FetchFailed(response.error or "Failed to fetch the page in the background")
        return scrape_from_html(response.html, schema, query, search_url).to_dict()

    # ---- schema creation ----

    async def create_schema(self) -> Dict[str, Any]:
        page = self._require_page()
        if self.inferrer is None:
            raise CollaboratorMissing("Configure an LLM provider first to analyze pages.")

        document = await page.snapshot()
        simplified = simplify_html(document)
        if len(simplified) < MIN_SIMPLIFIED_LENGTH:
            raise PageTooSmall("The page does not have enough HTML content to analyze.")

        raw = await self.inferrer.infer(simplified, page.url, await page.get_title())
        schema = schema_from_inference(raw, page.url)
        await self.repository.save(schema)

        # Sanity signal only; extraction can still fail later
        try:
            matched = len(document.select(schema.selectors.result_container))
        except SelectorError as e:
            logger.warning(f"Saved container selector does not compile: {e}")
            matched = 0
        logger.info(f"Schema '{schema.name}' container matches {matched} element(s) on {page.url}")
        return {
            "action": "createStructure",
            "success": True,
            "structure": schema.to_dict(),
            "matched_containers": matched,
            "message": (
                f'Schema created for "{schema.name}". '
                f"{matched} results detected on the page. "
                f'You can now "extract results" or "search [something] on {schema.name}".'
            ),
        }

    # ---- schema management ----

    async def list_schemas(self) -> Dict[str, Any]:
        schemas = await self.repository.get_all()
        return {
            "action": "listStructures",
            "structures": [s.to_dict() for s in schemas],
            "total": len(schemas),
        }

    async def delete_schema(self, name: str) -> Dict[str, Any]:
        name = (name or "").strip()
        if not name:
            raise MissingParameter('The name of the site to delete is required, e.g. "delete the DBLP schema".')
        schema = await self.repository.get_by_name(name)
        if schema is None:
            raise SchemaNotFound(f'No schema named "{name}".', await self._available())
        await self.repository.delete(name)
        return {
            "action": "deleteStructure",
            "success": True,
            "name": schema.name,
            "message": f'Schema "{schema.name}" deleted.',
        }

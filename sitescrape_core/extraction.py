#!/usr/bin/env python3
"""
Extraction Engine - selector-driven scraping of result listings.

Given a document and a SiteSchema, finds every result container and builds
one ExtractedRecord per container:

1. title + url   - titleLink text/href, else title text (+ nested <a> href)
2. authors       - authorLinks, else split the authors text line
3. date          - first 4-digit year 1900-2099 in the date element
4. abstract      - trimmed text of the abstract element
5. citations     - first "Cited by N" / bare number among citation elements

Containers without a title are dropped. A container that raises is logged
and skipped; one malformed result never aborts the page.
"""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import parse_qs, urlparse

from .dom import SoupElement, parse_html
from .errors import NoResultsFound, SchemaInvalid, SelectorError
from .schema_types import ExtractedRecord, ExtractionResult, ScrapedAuthor, SiteSchema, SiteSelectors

logger = logging.getLogger(__name__)

YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b", re.ASCII)
CITED_BY_RE = re.compile(r"(?:Cited by|Citado por|Citations?:?)\s*(\d+)", re.IGNORECASE | re.ASCII)
BARE_CITATIONS_RE = re.compile(r"(\d+)\s*(?:citations?|citas?)?", re.IGNORECASE | re.ASCII)
AUTHOR_SPLIT_RE = re.compile(r"[,;]")
TRAILING_ELLIPSIS_RE = re.compile(r"(?:…|\.\.\.)$")

# Author line is "names - venue, year"; only the part before " - " holds names
AUTHOR_VENUE_SEPARATOR = " - "
MAX_AUTHOR_FRAGMENT = 50

COMMON_QUERY_PARAMS = ["q", "query", "search", "keyword", "term"]


def split_author_text(text: str) -> List[str]:
    """Split an author line like 'J. Smith, A. Lee - Journal of X, 2020' into names"""
    text = (text or "").strip()
    author_part = text.split(AUTHOR_VENUE_SEPARATOR)[0] or text
    names = []
    for fragment in AUTHOR_SPLIT_RE.split(author_part):
        fragment = fragment.strip()
        if not fragment or len(fragment) >= MAX_AUTHOR_FRAGMENT:
            continue
        clean = TRAILING_ELLIPSIS_RE.sub("", fragment).strip()
        if len(clean) > 1:
            names.append(clean)
    return names


def find_year(text: str) -> str:
    match = YEAR_RE.search(text or "")
    return match.group(0) if match else ""


def parse_citation_count(texts: Iterable[str]) -> str:
    """Scan citation texts in order; first labeled or bare number wins, default "0"."""
    for text in texts:
        text = (text or "").strip()
        match = CITED_BY_RE.search(text)
        if match:
            return match.group(1)
        match = BARE_CITATIONS_RE.fullmatch(text)
        if match:
            return match.group(1)
    return "0"


def _extract_record(element: SoupElement, selectors: SiteSelectors) -> ExtractedRecord:
    title = ""
    url = ""

    if selectors.title_link:
        link = element.select_one(selectors.title_link)
        if link is not None:
            title = link.text.strip()
            url = link.attr("href")
    if not title and selectors.title:
        title_el = element.select_one(selectors.title)
        if title_el is not None:
            title = title_el.text.strip()
            if not url:
                nested = title_el.select_one("a")
                url = nested.attr("href") if nested is not None else ""

    authors: List[ScrapedAuthor] = []
    if selectors.author_links:
        for link in element.select(selectors.author_links):
            name = link.text.strip()
            if name:
                authors.append(ScrapedAuthor(name=name, url=link.attr("href")))
    if not authors and selectors.authors:
        authors_el = element.select_one(selectors.authors)
        if authors_el is not None:
            authors = [ScrapedAuthor(name=n) for n in split_author_text(authors_el.text)]

    date = ""
    if selectors.date:
        date_el = element.select_one(selectors.date)
        if date_el is not None:
            date = find_year(date_el.text)

    abstract = ""
    if selectors.abstract:
        abstract_el = element.select_one(selectors.abstract)
        abstract = abstract_el.text.strip() if abstract_el is not None else ""

    citations = "0"
    if selectors.citations:
        citations = parse_citation_count(el.text for el in element.select(selectors.citations))

    return ExtractedRecord(
        title=title,
        url=url,
        date=date,
        authors=authors,
        citation_count=citations,
        abstract=abstract,
    )


def extract(document: SoupElement, schema: SiteSchema, query: str = "", source_url: str = "") -> ExtractionResult:
    """
    Apply a schema to a document.

    Raises:
        SchemaInvalid: schema has no result container selector (or it does not compile)
        NoResultsFound: the container selector matched nothing
    """
    selectors = schema.selectors
    if not selectors or not selectors.result_container:
        raise SchemaInvalid(
            f'Schema "{schema.name}" has no result container selector. '
            f'Open a results page of the site and create the schema again.'
        )

    try:
        containers = document.select(selectors.result_container)
    except SelectorError as e:
        raise SchemaInvalid(f'Schema "{schema.name}" has an invalid result container selector: {e}') from e

    if not containers:
        raise NoResultsFound(
            f'No results found with selector "{selectors.result_container}" in {schema.name}. '
            f'The page may be empty or its structure may have changed.'
        )

    records: List[ExtractedRecord] = []
    for index, element in enumerate(containers):
        try:
            record = _extract_record(element, selectors)
        except Exception as e:
            logger.warning(f"Skipping result #{index} on {schema.name}: {e}")
            continue
        if record.title:
            records.append(record)

    logger.info(f"Extracted {len(records)}/{len(containers)} results from {schema.name}")
    return ExtractionResult(
        source=schema.name,
        domain=schema.domain_tag,
        url=source_url,
        query=query,
        results=records,
        semantic_type=schema.semantic_type,
    )


def scrape_from_html(html: str, schema: SiteSchema, query: str, url: str) -> ExtractionResult:
    """Parse HTML into a detached document and extract from it"""
    return extract(parse_html(html, url=url), schema, query, url)


def extract_query_from_url(url: str, schema: Optional[SiteSchema] = None) -> str:
    """Recover the search term from a results-page URL"""
    try:
        params = parse_qs(urlparse(url).query, keep_blank_values=True)
    except ValueError:
        return ""

    def first(name: str) -> str:
        values = params.get(name)
        return values[0] if values else ""

    names = list(schema.search_param_names.keys()) if schema else []
    for name in names + COMMON_QUERY_PARAMS:
        value = first(name)
        if value:
            return value
    return ""

"""
Schema Types - Data structures for site schemas and extracted records

Contains:
- SiteSelectors - the eight CSS selectors describing one result listing
- SiteSchema - a named, persisted description of a scrapeable site
- ScrapedAuthor / ExtractedRecord - one scraped item
- ExtractionResult - aggregate returned by every extraction call

SiteSchema serializes to the JSON layout kept in the key-value store
(name, url, domain, search_url, search_params, selectors, semantic_structure).
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse


# JSON key -> dataclass attribute
SELECTOR_KEYS = {
    "resultContainer": "result_container",
    "title": "title",
    "titleLink": "title_link",
    "authors": "authors",
    "authorLinks": "author_links",
    "date": "date",
    "abstract": "abstract",
    "citations": "citations",
}


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class SiteSelectors:
    """CSS selectors; empty string means the field is absent on this site"""
    result_container: str = ""
    title: str = ""
    title_link: str = ""
    authors: str = ""
    author_links: str = ""
    date: str = ""
    abstract: str = ""
    citations: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, attr) for key, attr in SELECTOR_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SiteSelectors":
        data = data or {}
        return cls(**{attr: _str(data.get(key)) for key, attr in SELECTOR_KEYS.items()})


@dataclass
class SiteSchema:
    """Identifies one scrapeable site"""
    name: str
    origin_url: str
    domain_tag: str = "general"
    search_url_template: str = ""
    search_param_names: Dict[str, str] = field(default_factory=dict)
    selectors: SiteSelectors = field(default_factory=SiteSelectors)
    semantic_type: str = "General"

    @property
    def hostname(self) -> str:
        try:
            return urlparse(self.origin_url).hostname or ""
        except ValueError:
            return ""

    @property
    def is_extractable(self) -> bool:
        return bool(self.selectors.result_container)

    @property
    def supports_search(self) -> bool:
        return bool(self.search_url_template)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.origin_url,
            "domain": self.domain_tag,
            "search_url": self.search_url_template,
            "search_params": dict(self.search_param_names),
            "selectors": self.selectors.to_dict(),
            "semantic_structure": {"type": self.semantic_type},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SiteSchema":
        params = data.get("search_params") or {}
        semantic = data.get("semantic_structure") or {}
        return cls(
            name=_str(data.get("name")),
            origin_url=_str(data.get("url")),
            domain_tag=_str(data.get("domain", "general")),
            search_url_template=_str(data.get("search_url")),
            search_param_names={str(k): _str(v) for k, v in params.items()} if isinstance(params, dict) else {},
            selectors=SiteSelectors.from_dict(data.get("selectors")),
            semantic_type=_str(semantic.get("type", "General")) if isinstance(semantic, dict) else "General",
        )


@dataclass
class ScrapedAuthor:
    name: str
    url: str = ""


@dataclass
class ExtractedRecord:
    """One scraped item"""
    title: str
    url: str = ""
    date: str = ""
    authors: List[ScrapedAuthor] = field(default_factory=list)
    citation_count: str = "0"
    abstract: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "date": self.date,
            "authors": [asdict(a) for a in self.authors],
            "citations": self.citation_count,
            "abstract": self.abstract,
        }


@dataclass
class ExtractionResult:
    """Result of one extraction call; never persisted"""
    source: str
    domain: str
    url: str
    query: str
    results: List[ExtractedRecord] = field(default_factory=list)
    semantic_type: str = "General"
    action: str = "scrapeResults"

    @property
    def total_results(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "domain": self.domain,
            "url": self.url,
            "query": self.query,
            "totalResults": self.total_results,
            "results": [r.to_dict() for r in self.results],
            "action": self.action,
            "semantic_type": self.semantic_type,
        }


__all__ = [
    'SELECTOR_KEYS',
    'SiteSelectors',
    'SiteSchema',
    'ScrapedAuthor',
    'ExtractedRecord',
    'ExtractionResult',
]

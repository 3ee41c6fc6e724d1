"""
Schema Repository - durable store of named site schemas

Schemas live under a single key of a KeyValueStore as an ordered JSON list.
Lookups go by case-insensitive name, by partial name, or by the hostname of
the page being scraped.

Usage:
    repo = SchemaRepository(JsonFileStore())
    schema = await repo.find_by_hostname("scholar.google.com")
    await repo.save(schema)
"""

import asyncio
import copy
import logging
from typing import Any, List, Optional, Protocol
from urllib.parse import quote

from .schema_types import SiteSchema, SiteSelectors

logger = logging.getLogger(__name__)

STRUCTURES_KEY = "site_structures"

DEFAULT_SCHEMAS: List[SiteSchema] = [
    SiteSchema(
        name="Google Scholar",
        origin_url="https://scholar.google.com",
        domain_tag="academic",
        search_url_template="https://scholar.google.com/scholar?q={query}",
        search_param_names={"q": "query"},
        selectors=SiteSelectors(
            result_container=".gs_r.gs_or.gs_scl",
            title=".gs_rt",
            title_link=".gs_rt a",
            authors=".gs_a",
            author_links=".gs_a a",
            date=".gs_a",
            abstract=".gs_rs",
            citations=".gs_fl.gs_flb a",
        ),
        semantic_type="ArticleScientific",
    )
]


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def remove(self, key: str) -> None: ...


def default_schemas() -> List[SiteSchema]:
    return copy.deepcopy(DEFAULT_SCHEMAS)


def build_search_url(schema: SiteSchema, query: str) -> str:
    """Substitute {query} with the percent-encoded query term"""
    return schema.search_url_template.replace("{query}", quote(query, safe=""), 1)


class SchemaRepository:
    """
    Schema CRUD over a key-value store.

    get_all() never raises: an empty store is seeded with the built-in
    defaults, an unreadable one degrades to the defaults without persisting.
    Writes are read-modify-write of the whole list, serialised by an
    asyncio.Lock, and abort with the store error when the read fails.
    """

    def __init__(self, store: KeyValueStore, key: str = STRUCTURES_KEY):
        self.store = store
        self.key = key
        self._write_lock = asyncio.Lock()

    async def _load(self) -> Optional[List[SiteSchema]]:
        stored = await self.store.get(self.key)
        if not stored or not isinstance(stored, list):
            return None
        return [SiteSchema.from_dict(item) for item in stored if isinstance(item, dict)] or None

    async def _persist(self, schemas: List[SiteSchema]) -> None:
        await self.store.set(self.key, [s.to_dict() for s in schemas])

    async def _load_for_write(self) -> List[SiteSchema]:
        # Read errors propagate; only a missing or empty list is replaced by the defaults
        schemas = await self._load()
        return schemas if schemas is not None else default_schemas()

    async def get_all(self) -> List[SiteSchema]:
        try:
            schemas = await self._load()
            if schemas is None:
                defaults = default_schemas()
                await self._persist(defaults)
                logger.info(f"Seeded schema store with {len(defaults)} default schema(s)")
                return defaults
            return schemas
        except Exception as e:
            logger.warning(f"Schema store unavailable, using defaults: {e}")
            return default_schemas()

    async def site_names(self) -> List[str]:
        return [s.name for s in await self.get_all()]

    async def get_by_name(self, name: str) -> Optional[SiteSchema]:
        wanted = (name or "").lower()
        for schema in await self.get_all():
            if schema.name.lower() == wanted:
                return schema
        return None

    async def find_by_name(self, name: str) -> Optional[SiteSchema]:
        """Exact name first, then the first schema whose name contains or is contained in `name`"""
        exact = await self.get_by_name(name)
        if exact:
            return exact
        wanted = (name or "").lower()
        if not wanted:
            return None
        for schema in await self.get_all():
            candidate = schema.name.lower()
            if wanted in candidate or candidate in wanted:
                return schema
        return None

    async def find_by_hostname(self, hostname: str) -> Optional[SiteSchema]:
        """First schema (stored order) whose origin hostname contains or is contained in `hostname`"""
        if not hostname:
            return None
        for schema in await self.get_all():
            site_host = schema.hostname
            if not site_host:
                continue
            if site_host in hostname or hostname in site_host:
                return schema
        return None

    async def save(self, schema: SiteSchema) -> None:
        async with self._write_lock:
            schemas = await self._load_for_write()
            wanted = schema.name.lower()
            for i, existing in enumerate(schemas):
                if existing.name.lower() == wanted:
                    schemas[i] = schema
                    break
            else:
                schemas.append(schema)
            await self._persist(schemas)
        logger.info(f"Saved schema '{schema.name}'")

    async def delete(self, name: str) -> None:
        async with self._write_lock:
            schemas = await self._load_for_write()
            wanted = (name or "").lower()
            remaining = [s for s in schemas if s.name.lower() != wanted]
            await self._persist(remaining)
        if len(remaining) != len(schemas):
            logger.info(f"Deleted schema '{name}'")

"""
Commands - the closed set of actions the dispatcher understands.

A parsed instruction arrives as {"action": str, "params": dict}.
command_from_dict() turns it into one of seven typed commands and rejects
anything else before dispatch.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .errors import UnknownCommand


@dataclass(frozen=True)
class ChangeColor:
    color: Optional[str] = None
    action = "changeColor"


@dataclass(frozen=True)
class GetHeadings:
    action = "getHeadings"


@dataclass(frozen=True)
class ScrapeCurrentPage:
    action = "scrapeCurrentPage"


@dataclass(frozen=True)
class SearchSite:
    site: str = ""
    query: str = ""
    action = "searchSite"


@dataclass(frozen=True)
class CreateSchema:
    action = "createSchema"


@dataclass(frozen=True)
class ListSchemas:
    action = "listSchemas"


@dataclass(frozen=True)
class DeleteSchema:
    name: str = ""
    action = "deleteSchema"


Command = Union[ChangeColor, GetHeadings, ScrapeCurrentPage, SearchSite, CreateSchema, ListSchemas, DeleteSchema]

# Action names, including the names the LLM prompt of earlier versions used
ACTION_ALIASES = {
    "changeColor": "changeColor",
    "getHeadings": "getHeadings",
    "getTitles": "getHeadings",
    "scrapeCurrentPage": "scrapeCurrentPage",
    "scrapeResults": "scrapeCurrentPage",
    "searchSite": "searchSite",
    "createSchema": "createSchema",
    "createStructure": "createSchema",
    "listSchemas": "listSchemas",
    "listStructures": "listSchemas",
    "deleteSchema": "deleteSchema",
    "deleteStructure": "deleteSchema",
}


def _text(params: Dict[str, Any], key: str) -> str:
    value = params.get(key)
    if value is None:
        return ""
    return str(value).strip()


def command_from_dict(data: Dict[str, Any]) -> Command:
    """Build a typed command from {"action", "params"}; raises UnknownCommand"""
    if not isinstance(data, dict):
        raise UnknownCommand(f"Command must be an object, got {type(data).__name__}")
    action = ACTION_ALIASES.get(str(data.get("action") or ""))
    if action is None:
        raise UnknownCommand(f"Unknown command: {data.get('action')}")
    params = data.get("params") or {}
    if not isinstance(params, dict):
        params = {}

    if action == "changeColor":
        color = params.get("color")
        return ChangeColor(color=None if color is None else str(color))
    if action == "getHeadings":
        return GetHeadings()
    if action == "scrapeCurrentPage":
        return ScrapeCurrentPage()
    if action == "searchSite":
        return SearchSite(site=_text(params, "site"), query=_text(params, "query"))
    if action == "createSchema":
        return CreateSchema()
    if action == "listSchemas":
        return ListSchemas()
    return DeleteSchema(name=_text(params, "name"))

#!/usr/bin/env python3
"""
sitescrape CLI

Usage:
    sitescrape run "<instruction>" [--url URL | --html FILE]
    sitescrape scrape (--url URL | --html FILE [--url URL])
    sitescrape search <site> <query>
    sitescrape create-schema (--url URL | --html FILE [--url URL])
    sitescrape schemas list
    sitescrape schemas delete <name>
    sitescrape config set <provider[/model]> [--api-key KEY] [--base-url URL]
    sitescrape config show
    sitescrape config clear

--html works on a saved page without a browser; pass --url as well so the
page can be matched to a schema by hostname. --url alone opens the page in
headless Chromium.
"""

import argparse
import asyncio
import json
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

from .commands import CreateSchema, ListSchemas, ScrapeCurrentPage, SearchSite, DeleteSchema
from .command_parser import LLMCommandParser
from .config import config
from .diagnostics import configure_logging, get_logger
from .dispatcher import CommandDispatcher
from .error_handler import create_error_response, format_error_for_logging
from .errors import NoActivePage, ScrapeError
from .fetcher import PageFetcher
from .kv_store import JsonFileStore, _ensure_base
from .llm_client import create_llm_client
from .llm_config import LLMConfig, clear_llm_config, load_llm_config, save_llm_config
from .page import StaticPage, open_browser_page
from .schema_inference import LLMSchemaInferrer
from .schema_repository import SchemaRepository

logger = get_logger(__name__)


def open_store() -> JsonFileStore:
    return JsonFileStore(_ensure_base(config.workspace) / config.store_file)


async def resolve_llm_config(store) -> Optional[LLMConfig]:
    """Stored provider configuration first, then environment; None when unusable"""
    llm_config = await load_llm_config(store)
    if llm_config is None:
        llm_config = LLMConfig.from_env()
    if not llm_config.is_configured:
        logger.debug(f"LLM provider {llm_config.provider_name} not configured")
        return None
    return llm_config


@asynccontextmanager
async def open_page(args) -> AsyncIterator[Optional[Any]]:
    html_file = getattr(args, "html", None)
    url = getattr(args, "url", None)
    if html_file:
        path = Path(html_file)
        try:
            html = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise NoActivePage(f"Cannot read page file {path}: {e}") from e
        yield StaticPage(html, url=url or path.resolve().as_uri())
    elif url:
        async with open_browser_page(url) as page:
            yield page
    else:
        yield None


async def build_dispatcher(store, page=None) -> CommandDispatcher:
    llm_config = await resolve_llm_config(store)
    parser = inferrer = None
    if llm_config is not None:
        client = create_llm_client(llm_config)
        parser = LLMCommandParser(client)
        inferrer = LLMSchemaInferrer(client)
    return CommandDispatcher(
        SchemaRepository(store),
        fetcher=PageFetcher(),
        inferrer=inferrer,
        page=page,
        command_parser=parser,
    )


def _print(result: Dict[str, Any]) -> None:
    print(json.dumps(result, indent=2, ensure_ascii=False))


async def _run_command(args, command=None) -> Dict[str, Any]:
    store = open_store()
    async with open_page(args) as page:
        dispatcher = await build_dispatcher(store, page)
        if command is None:
            return await dispatcher.run_instruction(args.instruction)
        return await dispatcher.dispatch(command)


def _report(args, error: Exception) -> int:
    logger.error(format_error_for_logging(error, context=args.command))
    if args.json_errors:
        _print(create_error_response(error, context=args.command))
    return 1


def _execute(args, command=None) -> int:
    try:
        result = asyncio.run(_run_command(args, command))
    except ScrapeError as e:
        return _report(args, e)
    except Exception as e:
        # Browser and provider failures outside the ScrapeError hierarchy
        logger.debug("Unexpected failure", exc_info=True)
        return _report(args, e)
    _print(result)
    return 0


def cmd_run(args):
    """Run a natural-language instruction"""
    return _execute(args)


def cmd_scrape(args):
    """Extract results from a page using its saved schema"""
    return _execute(args, ScrapeCurrentPage())


def cmd_search(args):
    """Search a configured site in the background"""
    return _execute(args, SearchSite(site=args.site, query=args.query))


def cmd_create_schema(args):
    """Infer and save a schema for the page"""
    return _execute(args, CreateSchema())


def cmd_schemas(args):
    if args.schemas_command == "delete":
        return _execute(args, DeleteSchema(name=args.name))
    return _execute(args, ListSchemas())


def cmd_config(args):
    """Manage the stored LLM provider configuration"""
    store = open_store()
    if args.config_command == "set":
        llm_config = LLMConfig(provider=args.provider, api_token=args.api_key, base_url=args.base_url)
        try:
            llm_config.validate()
        except ValueError as e:
            logger.error(str(e))
            return 1
        asyncio.run(save_llm_config(store, llm_config))
        _print({"success": True, "config": llm_config.to_dict()})
        return 0
    if args.config_command == "clear":
        asyncio.run(clear_llm_config(store))
        _print({"success": True})
        return 0
    llm_config = asyncio.run(resolve_llm_config(store))
    _print({"configured": llm_config is not None, "config": llm_config.to_dict() if llm_config else None})
    return 0


def _add_page_args(p: argparse.ArgumentParser) -> None:
    p.add_argument('--url', help='Page URL (opened in Chromium unless --html is given)')
    p.add_argument('--html', help='Saved HTML file to use as the page')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitescrape",
        description="Schema-driven scraping of search result pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--json-errors', action='store_true', help='Also print errors as JSON on stdout')
    parser.add_argument('--debug', action='store_true', help='Verbose logging (same as SITESCRAPE_DEBUG=true)')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Run a natural-language instruction')
    run_parser.add_argument('instruction', help='e.g. "en google scholar busca iot"')
    _add_page_args(run_parser)
    run_parser.set_defaults(func=cmd_run)

    scrape_parser = subparsers.add_parser('scrape', help='Extract results from a page')
    _add_page_args(scrape_parser)
    scrape_parser.set_defaults(func=cmd_scrape)

    search_parser = subparsers.add_parser('search', help='Search a configured site')
    search_parser.add_argument('site', help='Site name, e.g. "Google Scholar"')
    search_parser.add_argument('query', help='Search terms')
    search_parser.set_defaults(func=cmd_search)

    create_parser = subparsers.add_parser('create-schema', help='Create a schema for a results page')
    _add_page_args(create_parser)
    create_parser.set_defaults(func=cmd_create_schema)

    schemas_parser = subparsers.add_parser('schemas', help='List or delete saved schemas')
    schemas_sub = schemas_parser.add_subparsers(dest='schemas_command')
    schemas_sub.add_parser('list', help='List saved schemas')
    delete_parser = schemas_sub.add_parser('delete', help='Delete a schema by name')
    delete_parser.add_argument('name', help='Schema name')
    schemas_parser.set_defaults(func=cmd_schemas, schemas_command='list')

    config_parser = subparsers.add_parser('config', help='LLM provider configuration')
    config_sub = config_parser.add_subparsers(dest='config_command')
    set_parser = config_sub.add_parser('set', help='Store provider configuration')
    set_parser.add_argument('provider', help='provider or provider/model, e.g. groq/llama-3.1-8b-instant')
    set_parser.add_argument('--api-key', help='API key (or env:VAR_NAME)')
    set_parser.add_argument('--base-url', help='Custom API endpoint')
    config_sub.add_parser('show', help='Show the active configuration')
    config_sub.add_parser('clear', help='Remove the stored configuration')
    config_parser.set_defaults(func=cmd_config, config_command='show')

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.debug:
        configure_logging(debug=True)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

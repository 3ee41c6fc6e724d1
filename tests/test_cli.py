"""Tests for the sitescrape command line."""

import json
from contextlib import asynccontextmanager
from pathlib import Path

import pytest

from sitescrape_core import cli

from conftest import SCHOLAR_HTML, SCHOLAR_URL


@pytest.fixture(autouse=True)
def workspace(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(cli.config, "workspace", tmp_path)
    for name in ("OPENAI_API_KEY", "SITESCRAPE_LLM_PROVIDER", "SITESCRAPE_LLM_API_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def output(capsys):
    return json.loads(capsys.readouterr().out)


def test_no_command_prints_help():
    assert cli.main([]) == 1


def test_schemas_list_seeds_store(workspace, capsys):
    assert cli.main(["schemas", "list"]) == 0
    data = output(capsys)
    assert data["total"] == 1
    stored = json.loads((workspace / "store.json").read_text(encoding="utf-8"))
    assert stored["site_structures"][0]["name"] == "Google Scholar"


def test_scrape_saved_html(workspace, capsys):
    page = workspace / "results.html"
    page.write_text(SCHOLAR_HTML, encoding="utf-8")

    assert cli.main(["scrape", "--html", str(page), "--url", SCHOLAR_URL]) == 0
    data = output(capsys)
    assert data["source"] == "Google Scholar"
    assert data["totalResults"] == 2


def test_scrape_saved_html_without_url_has_no_schema(workspace, capsys):
    page = workspace / "results.html"
    page.write_text(SCHOLAR_HTML, encoding="utf-8")
    assert cli.main(["--json-errors", "scrape", "--html", str(page)]) == 1
    data = output(capsys)
    assert data["success"] is False
    assert data["error"]["category"] == "lookup"


def test_search_unknown_site(capsys):
    assert cli.main(["--json-errors", "search", "Springer", "iot"]) == 1
    data = output(capsys)
    assert "Available sites: Google Scholar." in data["error"]["message"]


def test_run_without_llm_provider(capsys):
    assert cli.main(["run", "list sites"]) == 1
    assert capsys.readouterr().out == ""


def test_schemas_delete(capsys):
    assert cli.main(["schemas", "delete", "Google Scholar"]) == 0
    assert output(capsys)["name"] == "Google Scholar"


def test_config_set_show_clear(capsys):
    assert cli.main(["config", "set", "ollama/llama3.2"]) == 0
    assert output(capsys)["config"]["model_name"] == "llama3.2"

    assert cli.main(["config", "show"]) == 0
    data = output(capsys)
    assert data["configured"] is True
    assert data["config"]["provider_name"] == "ollama"

    assert cli.main(["config", "clear"]) == 0
    output(capsys)
    assert cli.main(["config"]) == 0
    assert output(capsys)["configured"] is False


def test_config_set_rejects_missing_key():
    assert cli.main(["config", "set", "openai"]) == 1


def test_browser_failure_is_reported_as_json(monkeypatch, capsys):
    @asynccontextmanager
    async def broken_browser(url):
        raise RuntimeError("Timeout 30000ms exceeded")
        yield

    monkeypatch.setattr(cli, "open_browser_page", broken_browser)

    assert cli.main(["--json-errors", "scrape", "--url", SCHOLAR_URL]) == 1
    data = output(capsys)
    assert data["success"] is False
    assert data["context"] == "scrape"
    assert data["error"]["type"] == "RuntimeError"
    assert data["error"]["category"] == "unknown"


def test_unreadable_html_file(workspace, capsys):
    assert cli.main(["--json-errors", "scrape", "--html", str(workspace / "missing.html")]) == 1
    data = output(capsys)
    assert data["error"]["type"] == "NoActivePage"

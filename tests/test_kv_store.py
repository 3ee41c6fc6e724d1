import asyncio
import json
import threading
from pathlib import Path

import pytest

from sitescrape_core.errors import StorageError
from sitescrape_core.kv_store import JsonFileStore, MemoryStore, _ensure_base


def test_memory_store_copies_values():
    store = MemoryStore({"a": {"n": 1}})
    value = asyncio.run(store.get("a"))
    value["n"] = 2
    assert asyncio.run(store.get("a")) == {"n": 1}

    asyncio.run(store.remove("a"))
    assert asyncio.run(store.get("a")) is None
    asyncio.run(store.remove("missing"))


def test_json_file_store_round_trip(tmp_path: Path):
    path = tmp_path / "store.json"
    store = JsonFileStore(path)
    assert asyncio.run(store.get("site_structures")) is None

    asyncio.run(store.set("site_structures", [{"name": "DBLP"}]))
    asyncio.run(store.set("ai_config", {"provider": "groq"}))

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "site_structures": [{"name": "DBLP"}],
        "ai_config": {"provider": "groq"},
    }
    reopened = JsonFileStore(path)
    assert asyncio.run(reopened.get("site_structures")) == [{"name": "DBLP"}]

    asyncio.run(reopened.remove("ai_config"))
    assert asyncio.run(store.get("ai_config")) is None
    assert not (tmp_path / "store.json.tmp").exists()


def test_json_file_store_rejects_corrupt_file(tmp_path: Path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        asyncio.run(JsonFileStore(path).get("x"))

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StorageError):
        asyncio.run(JsonFileStore(path).get("x"))


def test_ensure_base_creates_workspace(tmp_path: Path, monkeypatch):
    target = tmp_path / "ws" / "nested"
    assert _ensure_base(target) == target
    assert target.is_dir()

    monkeypatch.setenv("SITESCRAPE_WORKSPACE", str(tmp_path / "from_env"))
    assert _ensure_base() == tmp_path / "from_env"


def test_json_file_store_does_disk_io_off_the_event_loop(tmp_path: Path, monkeypatch):
    store = JsonFileStore(tmp_path / "store.json")
    io_threads = []
    read, write = store._read, store._write

    def tracking_read():
        io_threads.append(threading.get_ident())
        return read()

    def tracking_write(data):
        io_threads.append(threading.get_ident())
        write(data)

    monkeypatch.setattr(store, "_read", tracking_read)
    monkeypatch.setattr(store, "_write", tracking_write)

    async def scenario():
        loop_thread = threading.get_ident()
        await store.set("ai_config", {"provider": "groq"})
        assert await store.get("ai_config") == {"provider": "groq"}
        await store.remove("ai_config")
        return loop_thread

    loop_thread = asyncio.run(scenario())
    assert len(io_threads) == 5
    assert loop_thread not in io_threads

#!/usr/bin/env python3
"""
Key-value stores used for schemas and provider configuration.

Contract: get(key) -> value | None, set(key, value), remove(key).
Values must be JSON-serializable. No transactions; single keys only.
"""
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import StorageError

logger = logging.getLogger(__name__)


def _ensure_base(preferred: Optional[Path] = None) -> Path:
    base = preferred or Path(os.getenv("SITESCRAPE_WORKSPACE", "./workspace"))
    candidates = [
        base,
        Path(os.path.expanduser("~")) / ".cache" / "sitescrape",
        Path("/tmp/sitescrape"),
    ]
    for cand in candidates:
        try:
            cand.mkdir(parents=True, exist_ok=True)
            test = cand / ".writetest"
            with open(test, "w") as f:
                f.write("ok")
            test.unlink(missing_ok=True)
            return cand
        except OSError:
            logger.debug(f"Workspace candidate not writable: {cand}")
            continue
    return base


class MemoryStore:
    """Dict-backed store. Values are copied through JSON like a real store would."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value)

    async def get(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """All keys in one JSON document on disk."""

    def __init__(self, path: Optional[Path] = None, filename: str = "store.json"):
        if path is None:
            path = _ensure_base() / filename
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp.replace(self.path)
        except OSError as e:
            raise StorageError(f"Cannot write store {self.path}: {e}") from e

    def _update(self, key: str, value: Any = None, remove: bool = False) -> None:
        data = self._read()
        if remove:
            if key not in data:
                return
            del data[key]
        else:
            data[key] = value
        self._write(data)

    # Disk access runs in a worker thread so the event loop keeps serving other tasks
    async def get(self, key: str) -> Any:
        data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._update, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._update, key, remove=True)

"""
Installation-local key-value persistence.

Holds only what the device session manager needs to remember about this
installation: its device id, the last inactivity check and telemetry.
"""
import asyncio
import json
import os
from pathlib import Path
from typing import Dict, Optional, Protocol


class KeyValueStore(Protocol):
    async def get_item(self, key: str) -> Optional[str]:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileKeyValueStore:
    """Flat JSON object on disk, rewritten atomically on every change"""

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Local state file {self.path} is not a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)

    async def get_item(self, key: str) -> Optional[str]:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data[key] = value
            await asyncio.to_thread(self._write, data)

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            if key in data:
                del data[key]
                await asyncio.to_thread(self._write, data)

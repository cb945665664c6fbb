import json

import pytest

from infrastructure.local_storage import InMemoryKeyValueStore, JsonFileKeyValueStore


async def test_json_file_store_persists(tmp_path):
    path = tmp_path / "state" / "local_state.json"
    store = JsonFileKeyValueStore(str(path))

    assert await store.get_item("device_id") is None
    await store.set_item("device_id", "abc")
    await store.set_item("last_inactive_device_check", "2025-06-01T11:00:00")

    reopened = JsonFileKeyValueStore(str(path))
    assert await reopened.get_item("device_id") == "abc"

    await reopened.remove_item("device_id")
    assert json.loads(path.read_text()) == {"last_inactive_device_check": "2025-06-01T11:00:00"}


async def test_json_file_store_rejects_non_object(tmp_path):
    path = tmp_path / "local_state.json"
    path.write_text("[]")
    with pytest.raises(ValueError):
        await JsonFileKeyValueStore(str(path)).get_item("device_id")


async def test_in_memory_store():
    store = InMemoryKeyValueStore({"device_id": "abc"})
    assert await store.get_item("device_id") == "abc"
    await store.remove_item("device_id")
    await store.remove_item("device_id")
    assert await store.get_item("device_id") is None

from uuid import uuid4

import pytest

from infrastructure.realtime import ChangeEvent
from infrastructure.stores import NotificationStore


@pytest.fixture
def store(session_maker, change_feed):
    return NotificationStore(session_maker, change_feed)


async def test_notify_creates_inbox_entry(store, change_feed):
    async with change_feed.subscribe(["notifications"], events=[ChangeEvent.INSERT]) as subscription:
        await store.notify("resident-1", "Visitor Checked In", "Chidi has checked in.", invite_id="abc")
        change = await subscription.get(timeout=1)

    assert change.record["title"] == "Visitor Checked In"
    [notification] = await store.list_recent("resident-1")
    assert notification.message == "Chidi has checked in."
    assert notification.notification_type == "invite"
    assert notification.extra_data == {"invite_id": "abc"}
    assert notification.read is False


async def test_mark_read_and_delete(store):
    notification = await store.create("resident-1", "Title", "Body")

    assert await store.mark_read(notification.id)
    [stored] = await store.list_recent("resident-1")
    assert stored.read is True

    assert await store.delete(notification.id)
    assert not await store.delete(notification.id)
    assert not await store.mark_read(uuid4())


async def test_list_recent_is_limited(store):
    for i in range(12):
        await store.create("resident-1", f"Title {i}", "Body")
    await store.create("resident-2", "Other", "Body")

    assert len(await store.list_recent("resident-1")) == 10
    assert len(await store.list_recent("resident-1", limit=3)) == 3

    assert await store.delete_all("resident-1") == 12
    assert await store.list_recent("resident-1") == []
    assert len(await store.list_recent("resident-2")) == 1

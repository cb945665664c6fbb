from datetime import datetime, timedelta
from typing import Any, Dict, List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import domain.models  # noqa: F401  registers every table
from config import Settings
from domain.clock import EstateClock
from infrastructure.container import build_access_core
from infrastructure.local_storage import InMemoryKeyValueStore
from infrastructure.realtime import ChangeFeed
from infrastructure.stores import InviteStore


class FrozenClock(EstateClock):
    """Estate clock pinned to a fixed local time; Lagos is UTC+1 all year"""

    def __init__(self, local: datetime, tz: str = "Africa/Lagos"):
        super().__init__(tz)
        self.local = local

    def now_local(self) -> datetime:
        return self.local

    def now_utc(self) -> datetime:
        return self.local - timedelta(hours=1)

    def advance(self, **kwargs) -> None:
        self.local += timedelta(**kwargs)


class RecordingSink:
    def __init__(self):
        self.sent: List[Dict[str, Any]] = []

    async def notify(self, user_id: str, title: str, message: str, **extra: Any) -> None:
        self.sent.append({"user_id": user_id, "title": title, "message": message, **extra})


class FailingSink:
    async def notify(self, user_id: str, title: str, message: str, **extra: Any) -> None:
        raise RuntimeError("push gateway down")


T0 = datetime(2025, 6, 1, 12, 0, 0)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def clock():
    return FrozenClock(T0)


@pytest.fixture
def change_feed():
    return ChangeFeed()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def invite_store(session_maker, change_feed):
    return InviteStore(session_maker, change_feed)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url="sqlite+aiosqlite://",
        local_state_path=str(tmp_path / "local_state.json"),
        enable_schedulers=False,
    )


@pytest.fixture
def core(settings, session_maker, kv_store, clock, change_feed):
    return build_access_core(
        settings,
        session_maker,
        kv_store=kv_store,
        clock=clock,
        change_feed=change_feed,
    )

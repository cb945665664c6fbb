"""Device store adapter - the active_devices collection"""
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import delete, func, update
from sqlmodel import select

from domain.models.active_device import ActiveDevice


class DeviceStore:
    def __init__(self, session_maker: Callable):
        self._session_maker = session_maker

    async def list_for_user(self, user_id: str) -> List[ActiveDevice]:
        async with self._session_maker() as session:
            query = (
                select(ActiveDevice)
                .where(ActiveDevice.user_id == user_id)
                .order_by(ActiveDevice.last_login.desc())
            )
            result = await session.execute(query)
            return list(result.scalars().all())

    async def get(self, user_id: str, device_id: str) -> Optional[ActiveDevice]:
        async with self._session_maker() as session:
            query = select(ActiveDevice).where(
                ActiveDevice.user_id == user_id,
                ActiveDevice.device_id == device_id,
            )
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def touch(self, user_id: str, device_id: str, now: datetime) -> bool:
        """Refresh last_login of an existing record; False if there is none"""
        stmt = (
            update(ActiveDevice)
            .where(ActiveDevice.user_id == user_id, ActiveDevice.device_id == device_id)
            .values(last_login=now)
            .execution_options(synchronize_session=False)
        )
        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount > 0

    async def insert_if_below_limit(
        self, user_id: str, device_id: str, now: datetime, limit: int
    ) -> Optional[ActiveDevice]:
        """Count and insert in one transaction; None when the cap is reached"""
        async with self._session_maker() as session:
            count_query = select(func.count()).select_from(ActiveDevice).where(
                ActiveDevice.user_id == user_id
            )
            result = await session.execute(count_query)
            if result.scalar_one() >= limit:
                await session.rollback()
                return None

            device = ActiveDevice(user_id=user_id, device_id=device_id, last_login=now)
            session.add(device)
            await session.commit()
            await session.refresh(device)
            return device

    async def delete(self, user_id: str, device_id: str) -> int:
        stmt = delete(ActiveDevice).where(
            ActiveDevice.user_id == user_id,
            ActiveDevice.device_id == device_id,
        ).execution_options(synchronize_session=False)
        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount or 0

    async def list_inactive(self, before: datetime) -> List[ActiveDevice]:
        async with self._session_maker() as session:
            query = select(ActiveDevice).where(ActiveDevice.last_login < before)
            result = await session.execute(query)
            return list(result.scalars().all())

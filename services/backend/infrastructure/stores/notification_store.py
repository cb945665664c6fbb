"""Notification store - resident inbox, also the default notification sink"""
from typing import Any, Callable, List, Optional, Protocol
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select

from domain.models.notification import Notification
from infrastructure.realtime import ChangeEvent, ChangeFeed


class NotificationSink(Protocol):
    async def notify(self, user_id: str, title: str, message: str, **extra: Any) -> None:
        ...


class NotificationStore:
    collection = "notifications"

    def __init__(self, session_maker: Callable, change_feed: Optional[ChangeFeed] = None):
        self._session_maker = session_maker
        self._change_feed = change_feed

    async def create(
        self,
        user_id: str,
        title: str,
        message: str,
        notification_type: str = "invite",
        extra_data: Optional[dict] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            notification_type=notification_type,
            extra_data=extra_data or {},
        )
        async with self._session_maker() as session:
            session.add(notification)
            await session.commit()
            await session.refresh(notification)

        if self._change_feed is not None:
            self._change_feed.publish(
                self.collection, ChangeEvent.INSERT, notification.model_dump(mode="json")
            )
        return notification

    async def notify(self, user_id: str, title: str, message: str, **extra: Any) -> None:
        notification_type = extra.pop("notification_type", "invite")
        await self.create(user_id, title, message, notification_type=notification_type, extra_data=extra)

    async def list_recent(self, user_id: str, limit: int = 10) -> List[Notification]:
        async with self._session_maker() as session:
            query = (
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc())
                .limit(limit)
            )
            result = await session.execute(query)
            return list(result.scalars().all())

    async def mark_read(self, notification_id: UUID) -> bool:
        stmt = (
            update(Notification)
            .where(Notification.id == notification_id)
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount > 0

    async def delete(self, notification_id: UUID) -> bool:
        stmt = delete(Notification).where(Notification.id == notification_id).execution_options(
            synchronize_session=False
        )
        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount > 0

    async def delete_all(self, user_id: str) -> int:
        stmt = delete(Notification).where(Notification.user_id == user_id).execution_options(
            synchronize_session=False
        )
        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount or 0

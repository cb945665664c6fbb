"""Invite store adapter - CRUD and filtered queries over the three invite collections"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

import structlog
from sqlalchemy import delete, update
from sqlmodel import select

from domain.models.invite import (
    INVITE_TABLES,
    LOOKUP_ORDER,
    Invite,
    InviteKind,
    InviteStatus,
    collection_name,
)
from infrastructure.realtime import ChangeEvent, ChangeFeed

logger = structlog.get_logger()


def invite_record(invite: Invite) -> Dict[str, Any]:
    data = invite.model_dump(mode="json")
    data["kind"] = invite.kind.value
    return data


class InviteStore:
    def __init__(self, session_maker: Callable, change_feed: Optional[ChangeFeed] = None):
        self._session_maker = session_maker
        self._change_feed = change_feed

    def _publish(self, invite: Invite, event: ChangeEvent) -> None:
        if self._change_feed is None:
            return
        try:
            self._change_feed.publish(collection_name(invite.kind), event, invite_record(invite))
        except Exception as e:
            logger.error("change_feed_publish_failed", invite_id=str(invite.id), error=str(e))

    async def insert(self, invite: Invite) -> Invite:
        async with self._session_maker() as session:
            session.add(invite)
            await session.commit()
            await session.refresh(invite)

        self._publish(invite, ChangeEvent.INSERT)
        return invite

    async def get(self, kind: InviteKind, invite_id: UUID) -> Optional[Invite]:
        table = INVITE_TABLES[kind]
        async with self._session_maker() as session:
            result = await session.execute(select(table).where(table.id == invite_id))
            return result.scalar_one_or_none()

    async def get_by_id(self, invite_id: UUID) -> Optional[Invite]:
        """Search every collection for the id"""
        async with self._session_maker() as session:
            for kind in LOOKUP_ORDER:
                table = INVITE_TABLES[kind]
                result = await session.execute(select(table).where(table.id == invite_id))
                invite = result.scalar_one_or_none()
                if invite is not None:
                    return invite
        return None

    async def get_by_otp(self, otp: str) -> Optional[Invite]:
        """Fallback lookup for manual entry; the newest invite wins on collision"""
        async with self._session_maker() as session:
            for kind in LOOKUP_ORDER:
                table = INVITE_TABLES[kind]
                query = (
                    select(table)
                    .where(table.otp == otp)
                    .order_by(table.created_at.desc())
                    .limit(1)
                )
                result = await session.execute(query)
                invite = result.scalars().first()
                if invite is not None:
                    return invite
        return None

    async def apply_transition(self, invite: Invite, values: Dict[str, Any]) -> bool:
        """Write status, timestamps and member count in one conditional update.

        The update only lands if the row still carries the version that was
        read; False means another writer got there first.
        """
        table = type(invite)
        expected_version = invite.version
        stmt = (
            update(table)
            .where(table.id == invite.id, table.version == expected_version)
            .values(**values, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )

        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()

        if result.rowcount != 1:
            return False

        for key, value in values.items():
            setattr(invite, key, value)
        invite.version = expected_version + 1

        self._publish(invite, ChangeEvent.UPDATE)
        return True

    async def delete_pending(self, invite: Invite) -> bool:
        table = type(invite)
        stmt = delete(table).where(
            table.id == invite.id,
            table.status == InviteStatus.PENDING.value,
        ).execution_options(synchronize_session=False)
        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()

        deleted = result.rowcount == 1
        if deleted and self._change_feed is not None:
            self._change_feed.publish(
                collection_name(invite.kind),
                ChangeEvent.DELETE,
                {"id": str(invite.id), "kind": invite.kind.value},
            )
        return deleted

    async def list_for_resident(self, address: str, user_id: str) -> List[Invite]:
        invites: List[Invite] = []
        async with self._session_maker() as session:
            for kind in (InviteKind.ONE_TIME, InviteKind.RECURRING, InviteKind.GROUP):
                table = INVITE_TABLES[kind]
                query = select(table).where(
                    table.created_by == user_id,
                    table.address == address,
                )
                result = await session.execute(query)
                invites.extend(result.scalars().all())
        return invites

    async def list_all(self, estate_id: Optional[str] = None) -> List[Invite]:
        invites: List[Invite] = []
        async with self._session_maker() as session:
            for kind in (InviteKind.ONE_TIME, InviteKind.RECURRING, InviteKind.GROUP):
                table = INVITE_TABLES[kind]
                query = select(table)
                if estate_id:
                    query = query.where(table.estate_id == estate_id)
                result = await session.execute(query)
                invites.extend(result.scalars().all())

        invites.sort(key=lambda invite: invite.created_at, reverse=True)
        return invites

    async def delete_expired_pending(self, now: datetime) -> Dict[InviteKind, int]:
        """Delete invites still pending after their end time.

        The status filter is part of the DELETE itself, so an invite that
        is checked in between selection and deletion is never removed.
        """
        deleted: Dict[InviteKind, int] = {}
        async with self._session_maker() as session:
            for kind in (InviteKind.ONE_TIME, InviteKind.RECURRING, InviteKind.GROUP):
                table = INVITE_TABLES[kind]
                stmt = delete(table).where(
                    table.status == InviteStatus.PENDING.value,
                    table.end_date_time < now,
                ).execution_options(synchronize_session=False)
                result = await session.execute(stmt)
                deleted[kind] = result.rowcount or 0
            await session.commit()
        return deleted

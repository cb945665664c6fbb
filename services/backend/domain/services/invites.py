"""Invite creation, listing and deletion for residents and security staff"""
import secrets
from datetime import date, datetime, time
from typing import List, Optional
from uuid import UUID

import structlog

from domain.clock import EstateClock
from domain.errors import (
    InvalidInviteWindowError,
    InvalidTransitionError,
    InviteNotFoundError,
    InviteOwnershipError,
)
from domain.models.invite import (
    GroupInvite,
    Invite,
    InviteStatus,
    OneTimeInvite,
    RecurringInvite,
)

logger = structlog.get_logger()


def generate_otp() -> str:
    """Six digits, uniform over 100000-999999"""
    return str(secrets.randbelow(900000) + 100000)


def _check_window(start: datetime, end: datetime) -> None:
    if start >= end:
        raise InvalidInviteWindowError(start, end)


class InviteService:
    def __init__(self, store, clock: Optional[EstateClock] = None):
        self.store = store
        self.clock = clock

    def _local(self, dt: datetime) -> datetime:
        """Invite windows are stored as naive estate-local wall clock"""
        if self.clock is not None:
            return self.clock.to_local(dt)
        if dt.tzinfo is not None:
            raise ValueError("Cannot place an offset-aware time without the estate clock")
        return dt

    async def create_invite(
        self,
        resident_name: str,
        visitor_name: str,
        address: str,
        estate_id: str,
        created_by: str,
        start_date_time: datetime,
        end_date_time: datetime,
        visitor_phone: Optional[str] = None,
        is_recurring: bool = False,
    ) -> Invite:
        """One-time invite, or a recurring (utility) one when is_recurring is set"""
        start_date_time = self._local(start_date_time)
        end_date_time = self._local(end_date_time)
        _check_window(start_date_time, end_date_time)

        table = RecurringInvite if is_recurring else OneTimeInvite
        invite = table(
            otp=generate_otp(),
            created_by=created_by,
            resident_name=resident_name,
            visitor_name=visitor_name,
            visitor_phone=visitor_phone,
            address=address,
            estate_id=estate_id,
            start_date_time=start_date_time,
            end_date_time=end_date_time,
            status=InviteStatus.PENDING.value,
            is_recurring=is_recurring,
        )
        invite = await self.store.insert(invite)
        logger.info("invite_created", invite_id=str(invite.id), kind=invite.kind.value)
        return invite

    async def create_group_invite(
        self,
        resident_name: str,
        address: str,
        estate_id: str,
        created_by: str,
        visit_date: date,
        start_time: time,
        end_time: time,
        group_name: str,
    ) -> GroupInvite:
        start_date_time = self._local(datetime.combine(visit_date, start_time))
        end_date_time = self._local(datetime.combine(visit_date, end_time))
        _check_window(start_date_time, end_date_time)

        invite = GroupInvite(
            otp=generate_otp(),
            created_by=created_by,
            resident_name=resident_name,
            group_name=group_name,
            address=address,
            estate_id=estate_id,
            start_date_time=start_date_time,
            end_date_time=end_date_time,
            status=InviteStatus.PENDING.value,
            members_checked_in=0,
        )
        invite = await self.store.insert(invite)
        logger.info("invite_created", invite_id=str(invite.id), kind=invite.kind.value)
        return invite

    async def fetch_invites(self, address: str, user_id: str) -> List[Invite]:
        return await self.store.list_for_resident(address, user_id)

    async def fetch_all_invites(self, estate_id: Optional[str] = None) -> List[Invite]:
        return await self.store.list_all(estate_id)

    async def delete_invite(self, invite_id: UUID, requested_by: str) -> None:
        """Residents may withdraw their own invites while nobody has used them"""
        invite = await self.store.get_by_id(invite_id)
        if invite is None:
            raise InviteNotFoundError(str(invite_id))
        if invite.created_by != requested_by:
            raise InviteOwnershipError(str(invite_id))
        if invite.status != InviteStatus.PENDING.value:
            raise InvalidTransitionError("delete", invite.status)

        if not await self.store.delete_pending(invite):
            # Left pending between the read and the delete
            current = await self.store.get(invite.kind, invite.id)
            if current is None:
                raise InviteNotFoundError(str(invite_id))
            raise InvalidTransitionError("delete", current.status)

        logger.info("invite_deleted", invite_id=str(invite_id), kind=invite.kind.value)

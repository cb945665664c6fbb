"""Invite models - visitor passes kept in three collections.

One-time and recurring (utility) invites admit a single named visitor;
group invites admit a varying number of members tracked by a counter.
The kind is carried by the table class, never inferred from field shape.
"""
import enum
from datetime import date, datetime, time
from typing import ClassVar, Dict, Optional, Union
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field


class InviteStatus(str, enum.Enum):
    PENDING = "pending"
    CHECKED_IN = "checked-in"
    ACTIVE = "active"
    PAUSED = "paused"
    CHECKED_OUT = "checked-out"
    COMPLETED = "completed"


class InviteKind(str, enum.Enum):
    ONE_TIME = "one_time"
    RECURRING = "recurring"
    GROUP = "group"


class InviteBase(SQLModel):
    otp: str = Field(index=True, max_length=6)

    created_by: str = Field(index=True)  # issuing resident (auth user id)
    resident_name: str
    address: str = Field(index=True)
    estate_id: str = Field(index=True)

    # Estate-local wall clock, no tzinfo
    start_date_time: datetime
    end_date_time: datetime = Field(index=True)

    status: str = Field(default=InviteStatus.PENDING.value, index=True)
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None

    is_recurring: bool = Field(default=False)
    members_checked_in: int = Field(default=0)

    # Row revision for conditional writes
    version: int = Field(default=1)


class OneTimeInvite(InviteBase, table=True):
    __tablename__ = "individual_one_time_invites"
    kind: ClassVar[InviteKind] = InviteKind.ONE_TIME

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    visitor_name: str
    visitor_phone: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class RecurringInvite(InviteBase, table=True):
    __tablename__ = "individual_recurring_invites"
    kind: ClassVar[InviteKind] = InviteKind.RECURRING

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    visitor_name: str
    visitor_phone: Optional[str] = None
    is_recurring: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class GroupInvite(InviteBase, table=True):
    __tablename__ = "group_invites"
    kind: ClassVar[InviteKind] = InviteKind.GROUP

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    group_name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


Invite = Union[OneTimeInvite, RecurringInvite, GroupInvite]

INVITE_TABLES: Dict[InviteKind, type] = {
    InviteKind.ONE_TIME: OneTimeInvite,
    InviteKind.RECURRING: RecurringInvite,
    InviteKind.GROUP: GroupInvite,
}

# Order in which collections are searched when resolving a scan
LOOKUP_ORDER = (InviteKind.GROUP, InviteKind.ONE_TIME, InviteKind.RECURRING)


def collection_name(kind: InviteKind) -> str:
    return INVITE_TABLES[kind].__tablename__


class IndividualInviteCreate(SQLModel):
    resident_name: str = Field(min_length=1)
    visitor_name: str = Field(min_length=1)
    visitor_phone: Optional[str] = None
    address: str = Field(min_length=1)
    estate_id: str = Field(min_length=1)
    created_by: str = Field(min_length=1)
    start_date_time: datetime
    end_date_time: datetime


class GroupInviteCreate(SQLModel):
    resident_name: str = Field(min_length=1)
    group_name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    estate_id: str = Field(min_length=1)
    created_by: str = Field(min_length=1)
    visit_date: date
    start_time: time
    end_time: time


class InviteRead(SQLModel):
    id: UUID
    kind: InviteKind
    otp: str
    created_by: str
    resident_name: str
    address: str
    estate_id: str
    visitor_name: Optional[str] = None
    visitor_phone: Optional[str] = None
    group_name: Optional[str] = None
    start_date_time: datetime
    end_date_time: datetime
    status: str
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    is_recurring: bool
    members_checked_in: int
    created_at: datetime
    scan_uri: Optional[str] = None

    @classmethod
    def from_invite(cls, invite: Invite, scan_uri: Optional[str] = None) -> "InviteRead":
        data = invite.model_dump()
        data.pop("version", None)
        return cls(kind=invite.kind, scan_uri=scan_uri, **data)

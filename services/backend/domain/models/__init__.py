"""Domain models for the Gatekeeper access core"""
from .invite import (
    InviteStatus,
    InviteKind,
    OneTimeInvite,
    RecurringInvite,
    GroupInvite,
    Invite,
    InviteRead,
    INVITE_TABLES,
    LOOKUP_ORDER,
)
from .active_device import ActiveDevice
from .auth_session import AuthSession
from .notification import Notification

__all__ = [
    "InviteStatus",
    "InviteKind",
    "OneTimeInvite",
    "RecurringInvite",
    "GroupInvite",
    "Invite",
    "InviteRead",
    "INVITE_TABLES",
    "LOOKUP_ORDER",
    "ActiveDevice",
    "AuthSession",
    "Notification",
]

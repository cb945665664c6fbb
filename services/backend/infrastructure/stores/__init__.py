"""Store adapters over the persistent relational store"""
from .invite_store import InviteStore
from .device_store import DeviceStore
from .session_store import AuthSessionProvider, DatabaseSessionProvider
from .notification_store import NotificationSink, NotificationStore

__all__ = [
    "InviteStore",
    "DeviceStore",
    "AuthSessionProvider",
    "DatabaseSessionProvider",
    "NotificationSink",
    "NotificationStore",
]

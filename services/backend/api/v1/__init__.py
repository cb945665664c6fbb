"""API v1 routers"""
from . import (
    invites,
    scan,
    devices,
    sessions,
    notifications,
)

__all__ = [
    "invites",
    "scan",
    "devices",
    "sessions",
    "notifications",
]

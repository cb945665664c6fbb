"""Access core services"""
from .invite_lifecycle import InviteLifecycleEngine
from .invites import InviteService, generate_otp
from .expiration import ExpirationSweeper
from .notifications import TransitionNotifier, describe_transition
from .device_sessions import DeviceSessionManager
from .telemetry import DeviceTelemetry

__all__ = [
    "InviteLifecycleEngine",
    "InviteService",
    "generate_otp",
    "ExpirationSweeper",
    "TransitionNotifier",
    "describe_transition",
    "DeviceSessionManager",
    "DeviceTelemetry",
]

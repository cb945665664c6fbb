"""Errors raised by the access core.

Every rejection carries a distinct ``code`` so the scanning and device
management screens can tell "expired" from "wrong code" from "already
checked out" without parsing messages.
"""
from datetime import datetime
from typing import Optional


class AccessCoreError(Exception):
    code = "access_core_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InviteNotFoundError(AccessCoreError):
    code = "invite_not_found"

    def __init__(self, invite_id: Optional[str] = None):
        self.invite_id = invite_id
        if invite_id:
            message = f"Invite {invite_id} not found"
        else:
            message = "No invite matches this code"
        super().__init__(message)


class InvalidOtpError(AccessCoreError):
    code = "invalid_otp"

    def __init__(self, message: str = "Invalid OTP"):
        super().__init__(message)


class OutsideValidityWindowError(AccessCoreError):
    code = "outside_validity_window"

    def __init__(self, action: str, start: datetime, end: datetime, now: datetime):
        self.action = action
        self.start = start
        self.end = end
        self.now = now
        reason = "not yet valid" if now < start else "expired"
        super().__init__(
            f"Cannot {action}: invite is {reason} "
            f"(valid {start:%Y-%m-%d %H:%M} to {end:%Y-%m-%d %H:%M})"
        )


class InvalidTransitionError(AccessCoreError):
    code = "invalid_transition"

    def __init__(self, action: str, status: str):
        self.action = action
        self.status = status
        super().__init__(f"Cannot {action} an invite that is {status}")


class InvalidInviteWindowError(AccessCoreError):
    code = "invalid_invite_window"

    def __init__(self, start: datetime, end: datetime):
        self.start = start
        self.end = end
        super().__init__("Invite end time must be after its start time")


class InviteOwnershipError(AccessCoreError):
    code = "invite_not_owned"

    def __init__(self, invite_id: str):
        self.invite_id = invite_id
        super().__init__("Only the issuing resident can delete this invite")


class ConcurrentTransitionError(AccessCoreError):
    code = "concurrent_transition"

    def __init__(self, invite_id: str, attempts: int):
        self.invite_id = invite_id
        self.attempts = attempts
        super().__init__(
            f"Invite {invite_id} was modified concurrently; gave up after {attempts} attempts"
        )


class DeviceLimitExceededError(AccessCoreError):
    code = "device_limit_exceeded"

    def __init__(self, user_id: str, limit: int):
        self.user_id = user_id
        self.limit = limit
        super().__init__(
            "Maximum number of devices reached. "
            "Please remove a device before adding a new one."
        )


class InvalidDeviceIdentityError(AccessCoreError):
    code = "invalid_device_identity"

    def __init__(self, message: str = "Invalid userId or deviceId"):
        super().__init__(message)

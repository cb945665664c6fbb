"""Invite state machine.

Pure functions: given the current invite, the scan action and estate-local
"now", compute the next persisted state or raise the rejection reason.
Nothing here touches storage.
"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from domain.errors import InvalidTransitionError, OutsideValidityWindowError
from domain.models.invite import Invite, InviteKind, InviteStatus


class ScanAction(str, enum.Enum):
    FETCH = "fetch"
    CHECKIN = "checkin"
    CHECKOUT = "checkout"


@dataclass(frozen=True)
class Transition:
    status: str
    entry_time: Optional[datetime]
    exit_time: Optional[datetime]
    members_checked_in: int

    def as_values(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "entry_time": self.entry_time,
            "exit_time": self.exit_time,
            "members_checked_in": self.members_checked_in,
        }


def ensure_within_window(invite: Invite, action: ScanAction, now: datetime) -> None:
    """Only a pending invite is window-checked.

    An admitted visitor must still be able to check out after the
    scheduled end time, so in-progress invites skip this check.
    """
    if invite.status != InviteStatus.PENDING.value:
        return
    if now < invite.start_date_time or now > invite.end_date_time:
        raise OutsideValidityWindowError(
            action.value, invite.start_date_time, invite.end_date_time, now
        )


def compute_transition(invite: Invite, action: ScanAction, now: datetime) -> Transition:
    kind = invite.kind
    status = invite.status
    members = invite.members_checked_in or 0

    if action is ScanAction.CHECKIN:
        if status == InviteStatus.PENDING.value:
            if kind is InviteKind.GROUP:
                return Transition(InviteStatus.ACTIVE.value, now, invite.exit_time, members + 1)
            return Transition(InviteStatus.CHECKED_IN.value, now, invite.exit_time, members)

        if status == InviteStatus.ACTIVE.value and kind is InviteKind.GROUP:
            return Transition(InviteStatus.ACTIVE.value, invite.entry_time, invite.exit_time, members + 1)

        if status == InviteStatus.CHECKED_OUT.value and kind is InviteKind.RECURRING:
            # Utility passes re-arm after checkout until the window closes
            if now >= invite.end_date_time:
                raise OutsideValidityWindowError(
                    action.value, invite.start_date_time, invite.end_date_time, now
                )
            return Transition(InviteStatus.CHECKED_IN.value, now, invite.exit_time, members)

    elif action is ScanAction.CHECKOUT:
        if kind is InviteKind.GROUP and status in (
            InviteStatus.ACTIVE.value,
            InviteStatus.CHECKED_IN.value,
        ):
            remaining = max(members - 1, 0)
            next_status = InviteStatus.ACTIVE.value if remaining > 0 else InviteStatus.PENDING.value
            return Transition(next_status, invite.entry_time, now, remaining)

        if status == InviteStatus.CHECKED_IN.value and kind is not InviteKind.GROUP:
            return Transition(InviteStatus.CHECKED_OUT.value, invite.entry_time, now, members)

    raise InvalidTransitionError(action.value, status)

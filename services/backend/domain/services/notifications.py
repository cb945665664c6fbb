"""Notification side effects of invite transitions"""
from typing import Optional, Tuple

import structlog

from domain.models.invite import Invite, InviteKind
from domain.transitions import ScanAction

logger = structlog.get_logger()


def describe_transition(invite: Invite, action: ScanAction) -> Optional[Tuple[str, str]]:
    """Title and message for the issuing resident, or None if nothing to say"""
    if action is ScanAction.CHECKIN:
        verb = "checked in"
    elif action is ScanAction.CHECKOUT:
        verb = "checked out"
    else:
        return None

    if invite.kind is InviteKind.GROUP:
        title = "Group Member Checked In" if action is ScanAction.CHECKIN else "Group Member Checked Out"
        message = (
            f"{invite.group_name} has a member {verb}. "
            f"Total members checked in: {invite.members_checked_in}."
        )
        return title, message

    title = "Visitor Checked In" if action is ScanAction.CHECKIN else "Visitor Checked Out"
    return title, f"{invite.visitor_name} has {verb}."


class TransitionNotifier:
    """Sends the resident notification for a persisted transition.

    Runs strictly after the write; a failing sink never undoes or fails
    the transition.
    """

    def __init__(self, sink):
        self.sink = sink

    async def notify(self, invite: Invite, action: ScanAction) -> bool:
        described = describe_transition(invite, action)
        if described is None:
            return False

        title, message = described
        try:
            await self.sink.notify(
                invite.created_by,
                title,
                message,
                invite_id=str(invite.id),
                invite_kind=invite.kind.value,
                status=invite.status,
            )
        except Exception as e:
            logger.error(
                "invite_notification_failed",
                invite_id=str(invite.id),
                action=action.value,
                error=str(e),
            )
            return False
        return True

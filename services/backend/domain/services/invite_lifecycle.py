"""
Invite Lifecycle Engine.

Resolves a scanned identifier to an invite and applies the requested
check-in / check-out transition. Every scan runs the same pipeline:
parse, look up, verify the OTP, check the window, compute the next state,
persist it conditionally, then notify the issuing resident.
"""
from typing import Optional
from uuid import UUID

import structlog

from domain.clock import EstateClock
from domain.errors import (
    ConcurrentTransitionError,
    InvalidOtpError,
    InviteNotFoundError,
)
from domain.models.invite import Invite
from domain.scan import DEFAULT_SCHEME, ScanIdentifier, ScanPayload, parse_scan_identifier
from domain.services.notifications import TransitionNotifier
from domain.transitions import ScanAction, compute_transition, ensure_within_window

logger = structlog.get_logger()


class InviteLifecycleEngine:
    def __init__(
        self,
        store,
        notifier: TransitionNotifier,
        clock: EstateClock,
        scheme: str = DEFAULT_SCHEME,
        max_retries: int = 3,
    ):
        self.store = store
        self.notifier = notifier
        self.clock = clock
        self.scheme = scheme
        self.max_retries = max(1, max_retries)

    async def _lookup(self, payload: ScanPayload) -> Invite:
        if payload.is_empty:
            raise InvalidOtpError("No scan code provided")

        if payload.invite_id:
            try:
                invite_id = UUID(payload.invite_id)
            except ValueError:
                raise InviteNotFoundError(payload.invite_id)
            invite = await self.store.get_by_id(invite_id)
            if invite is None:
                raise InviteNotFoundError(payload.invite_id)
            return invite

        invite = await self.store.get_by_otp(payload.otp)
        if invite is None:
            raise InviteNotFoundError()
        return invite

    async def resolve_scan(self, identifier: ScanIdentifier, action: ScanAction) -> Invite:
        action = ScanAction(action)
        payload = parse_scan_identifier(identifier, self.scheme)
        invite = await self._lookup(payload)

        if action is ScanAction.FETCH:
            return invite

        if payload.invite_id and payload.otp and payload.otp != invite.otp:
            logger.warning("scan_otp_mismatch", invite_id=str(invite.id))
            raise InvalidOtpError()

        for attempt in range(1, self.max_retries + 1):
            now = self.clock.now_local()
            ensure_within_window(invite, action, now)
            transition = compute_transition(invite, action, now)

            if await self.store.apply_transition(invite, transition.as_values()):
                logger.info(
                    "invite_transitioned",
                    invite_id=str(invite.id),
                    kind=invite.kind.value,
                    action=action.value,
                    status=invite.status,
                    members_checked_in=invite.members_checked_in,
                )
                await self.notifier.notify(invite, action)
                return invite

            logger.warning(
                "invite_transition_conflict",
                invite_id=str(invite.id),
                attempt=attempt,
            )
            refreshed: Optional[Invite] = await self.store.get(invite.kind, invite.id)
            if refreshed is None:
                raise InviteNotFoundError(str(invite.id))
            invite = refreshed

        raise ConcurrentTransitionError(str(invite.id), self.max_retries)

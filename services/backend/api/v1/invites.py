"""Invites API - resident invite management and security visitor listing"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
import structlog

from api.deps import get_access_core, get_estate_id
from domain.models.invite import (
    INVITE_TABLES,
    GroupInviteCreate,
    IndividualInviteCreate,
    Invite,
    InviteRead,
)
from domain.scan import build_scan_uri
from infrastructure.container import AccessCore
from infrastructure.realtime import ChangeEvent

logger = structlog.get_logger()

router = APIRouter()

INVITE_COLLECTIONS = [table.__tablename__ for table in INVITE_TABLES.values()]


def to_read(invite: Invite, core: AccessCore) -> InviteRead:
    scan_uri = build_scan_uri(invite.id, invite.otp, core.settings.scan_uri_scheme)
    return InviteRead.from_invite(invite, scan_uri=scan_uri)


async def _create_individual(request: IndividualInviteCreate, core: AccessCore, is_recurring: bool) -> InviteRead:
    invite = await core.invites.create_invite(
        resident_name=request.resident_name,
        visitor_name=request.visitor_name,
        visitor_phone=request.visitor_phone,
        address=request.address,
        estate_id=request.estate_id,
        created_by=request.created_by,
        start_date_time=request.start_date_time,
        end_date_time=request.end_date_time,
        is_recurring=is_recurring,
    )
    return to_read(invite, core)


@router.post("/individual", response_model=InviteRead, status_code=201)
async def create_individual_invite(
    request: IndividualInviteCreate,
    core: AccessCore = Depends(get_access_core),
):
    """Single-use pass for one named visitor"""
    return await _create_individual(request, core, is_recurring=False)


@router.post("/utility", response_model=InviteRead, status_code=201)
async def create_utility_invite(
    request: IndividualInviteCreate,
    core: AccessCore = Depends(get_access_core),
):
    """Recurring pass, e.g. for a cleaner or gardener"""
    return await _create_individual(request, core, is_recurring=True)


@router.post("/group", response_model=InviteRead, status_code=201)
async def create_group_invite(
    request: GroupInviteCreate,
    core: AccessCore = Depends(get_access_core),
):
    invite = await core.invites.create_group_invite(
        resident_name=request.resident_name,
        address=request.address,
        estate_id=request.estate_id,
        created_by=request.created_by,
        visit_date=request.visit_date,
        start_time=request.start_time,
        end_time=request.end_time,
        group_name=request.group_name,
    )
    return to_read(invite, core)


@router.get("/", response_model=List[InviteRead])
async def list_resident_invites(
    address: str,
    user_id: str,
    core: AccessCore = Depends(get_access_core),
):
    invites = await core.invites.fetch_invites(address, user_id)
    return [to_read(invite, core) for invite in invites]


@router.get("/all", response_model=List[InviteRead])
async def list_all_invites(
    estate_id: Optional[str] = Depends(get_estate_id),
    core: AccessCore = Depends(get_access_core),
):
    """Every invite, newest first - security visitor management"""
    invites = await core.invites.fetch_all_invites(estate_id)
    return [to_read(invite, core) for invite in invites]


@router.post("/sweep")
async def sweep_expired_invites(core: AccessCore = Depends(get_access_core)):
    """Run the expiration sweep now instead of waiting for the scheduler"""
    deleted = await core.sweeper.sweep_expired()
    return {"deleted": deleted}


@router.delete("/{invite_id}", status_code=204)
async def delete_invite(
    invite_id: UUID,
    user_id: str = Query(..., description="Resident requesting the deletion"),
    core: AccessCore = Depends(get_access_core),
):
    await core.invites.delete_invite(invite_id, user_id)


@router.websocket("/feed")
async def invite_feed(websocket: WebSocket, user_id: Optional[str] = None):
    """
    Push invite changes to resident screens.
    With user_id only that resident's invites are streamed.
    """
    core: AccessCore = websocket.app.state.access_core
    await websocket.accept()

    def belongs_to_user(change) -> bool:
        return user_id is None or change.record.get("created_by") == user_id

    events = (ChangeEvent.INSERT, ChangeEvent.UPDATE, ChangeEvent.DELETE)
    try:
        async with core.change_feed.subscribe(
            INVITE_COLLECTIONS,
            events=events,
            predicate=belongs_to_user if user_id else None,
        ) as subscription:
            async for change in subscription:
                await websocket.send_json({
                    "collection": change.collection,
                    "event": change.event.value,
                    "record": change.record,
                })
    except WebSocketDisconnect:
        logger.info("invite_feed_disconnected", user_id=user_id)

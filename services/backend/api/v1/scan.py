"""Scan API - security desk check-in / check-out"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.deps import get_access_core
from domain.models.invite import InviteRead
from domain.scan import ScanPayload
from domain.transitions import ScanAction
from infrastructure.container import AccessCore

router = APIRouter()


class ScanRequest(BaseModel):
    """Either the raw scanned text / typed OTP, or an explicit id + otp pair"""
    identifier: Optional[str] = None
    id: Optional[str] = None
    otp: Optional[str] = None
    action: ScanAction = ScanAction.FETCH


@router.post("/", response_model=InviteRead)
async def resolve_scan(
    request: ScanRequest,
    core: AccessCore = Depends(get_access_core),
):
    if request.identifier:
        identifier = request.identifier
    elif request.id or request.otp:
        identifier = ScanPayload(otp=request.otp, invite_id=request.id)
    else:
        raise HTTPException(status_code=422, detail="identifier, id or otp is required")

    invite = await core.lifecycle.resolve_scan(identifier, request.action)
    return InviteRead.from_invite(invite)

"""Sessions API - sign-in / sign-out bound to the device registry"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_access_core
from domain.models.active_device import ActiveDeviceRead
from domain.models.auth_session import AuthSessionRead
from infrastructure.container import AccessCore

router = APIRouter()


class SignInRequest(BaseModel):
    user_id: str
    device_id: Optional[str] = None  # defaults to this installation


class SignOutRequest(BaseModel):
    user_id: str
    device_id: Optional[str] = None


class SignInResponse(BaseModel):
    device: ActiveDeviceRead
    session: AuthSessionRead


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(request: SignInRequest, core: AccessCore = Depends(get_access_core)):
    device_id = request.device_id or await core.devices.get_current_device_id()
    device, session = await core.devices.sign_in(request.user_id, device_id)
    return SignInResponse(
        device=ActiveDeviceRead.model_validate(device, from_attributes=True),
        session=AuthSessionRead.model_validate(session, from_attributes=True),
    )


@router.post("/sign-out", status_code=204)
async def sign_out(request: SignOutRequest, core: AccessCore = Depends(get_access_core)):
    device_id = request.device_id or await core.devices.get_current_device_id()
    await core.devices.sign_out(request.user_id, device_id)

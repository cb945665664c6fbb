"""Devices API - per-account device registry"""
from typing import List, Optional

from fastapi import APIRouter, Depends

from api.deps import get_access_core
from domain.models.active_device import ActiveDeviceCreate, ActiveDeviceRead
from infrastructure.container import AccessCore

router = APIRouter()


@router.get("/current-id")
async def current_device_id(core: AccessCore = Depends(get_access_core)):
    """Id of this installation"""
    return {"device_id": await core.devices.get_current_device_id()}


@router.post("/inactive/sweep")
async def sweep_inactive_devices(core: AccessCore = Depends(get_access_core)):
    removed = await core.devices.remove_inactive_devices()
    return {"removed": removed}


@router.post("/periodic-check")
async def periodic_device_check(core: AccessCore = Depends(get_access_core)):
    ran = await core.devices.perform_periodic_check()
    return {"ran": ran}


@router.post("/", response_model=ActiveDeviceRead, status_code=201)
async def add_device(
    request: ActiveDeviceCreate,
    core: AccessCore = Depends(get_access_core),
):
    return await core.devices.add_device(request.user_id, request.device_id)


@router.get("/{user_id}", response_model=List[ActiveDeviceRead])
async def list_devices(user_id: str, core: AccessCore = Depends(get_access_core)):
    return await core.devices.get_active_devices(user_id)


@router.get("/{user_id}/active")
async def device_active(
    user_id: str,
    device_id: Optional[str] = None,
    core: AccessCore = Depends(get_access_core),
):
    return {"active": await core.devices.is_device_active(user_id, device_id)}


@router.delete("/{user_id}/{device_id}", status_code=204)
async def remove_device(
    user_id: str,
    device_id: str,
    core: AccessCore = Depends(get_access_core),
):
    """Remove the device and sign its session out"""
    await core.devices.remove_device(user_id, device_id)

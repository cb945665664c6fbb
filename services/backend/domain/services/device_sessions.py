"""
Device Session Manager.

Caps how many installations may hold a live session per account, tracks
when each was last used and revokes the ones that go quiet. Removal always
pairs deleting the device record with signing out its auth session.
"""
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from uuid import uuid4

import structlog

from domain.clock import EstateClock
from domain.errors import DeviceLimitExceededError, InvalidDeviceIdentityError
from domain.models.active_device import ActiveDevice
from domain.services.telemetry import DeviceTelemetry

logger = structlog.get_logger()

DEVICE_ID_KEY = "device_id"
LAST_CHECK_KEY = "last_inactive_device_check"


class _UserLock:
    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0  # holders plus waiters


class DeviceSessionManager:
    def __init__(
        self,
        device_store,
        session_provider,
        kv_store,
        clock: EstateClock,
        device_limit: int = 3,
        inactivity_days: int = 30,
        check_interval_hours: int = 24,
        enabled: bool = True,
        telemetry: Optional[DeviceTelemetry] = None,
    ):
        self.device_store = device_store
        self.session_provider = session_provider
        self.kv_store = kv_store
        self.clock = clock
        self.device_limit = device_limit
        self.inactivity_days = inactivity_days
        self.check_interval_hours = check_interval_hours
        self.enabled = enabled
        self.telemetry = telemetry or DeviceTelemetry(kv_store)
        self._user_locks: Dict[str, _UserLock] = {}

    @asynccontextmanager
    async def _user_lock(self, user_id: str):
        """Serialize additions per account; the entry goes once nobody holds or awaits it"""
        entry = self._user_locks.get(user_id)
        if entry is None:
            entry = self._user_locks[user_id] = _UserLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._user_locks[user_id]

    async def get_current_device_id(self) -> str:
        """Stable id of this installation, created on first use"""
        try:
            device_id = await self.kv_store.get_item(DEVICE_ID_KEY)
            if not device_id:
                device_id = str(uuid4())
                await self.kv_store.set_item(DEVICE_ID_KEY, device_id)
                logger.info("device_id_generated", device_id=device_id)
            return device_id
        except Exception as e:
            device_id = str(uuid4())
            logger.error("device_id_storage_failed", error=str(e), fallback_device_id=device_id)
            return device_id

    async def get_active_devices(self, user_id: str) -> List[ActiveDevice]:
        return await self.device_store.list_for_user(user_id)

    async def add_device(self, user_id: str, device_id: str) -> ActiveDevice:
        if not user_id or not user_id.strip() or not device_id or not device_id.strip():
            raise InvalidDeviceIdentityError()

        async with self._user_lock(user_id):
            now = self.clock.now_utc()
            if await self.device_store.touch(user_id, device_id, now):
                logger.info("device_login_refreshed", user_id=user_id, device_id=device_id)
                return await self.device_store.get(user_id, device_id)

            device = await self.device_store.insert_if_below_limit(
                user_id, device_id, now, self.device_limit
            )
            if device is None:
                logger.warning("device_limit_reached", user_id=user_id, limit=self.device_limit)
                raise DeviceLimitExceededError(user_id, self.device_limit)

            logger.info("device_added", user_id=user_id, device_id=device_id)
            return device

    async def is_device_active(self, user_id: str, device_id: Optional[str] = None) -> bool:
        if device_id is None:
            device_id = await self.get_current_device_id()
        return await self.device_store.get(user_id, device_id) is not None

    async def unified_device_removal(
        self, user_id: str, device_id: str, is_automated: bool = False
    ) -> None:
        """Delete the device record and sign its session out.

        Both steps are attempted even when the first fails; the first
        error is raised once both have run.
        """
        first_error: Optional[Exception] = None

        try:
            await self.device_store.delete(user_id, device_id)
        except Exception as e:
            logger.error("device_record_delete_failed", user_id=user_id, device_id=device_id, error=str(e))
            first_error = e

        try:
            revoked = await self.session_provider.sign_out(user_id, device_id)
            if not revoked:
                logger.info("device_had_no_live_session", user_id=user_id, device_id=device_id)
        except Exception as e:
            logger.error("device_sign_out_failed", user_id=user_id, device_id=device_id, error=str(e))
            if first_error is None:
                first_error = e

        await self.telemetry.record(
            "deviceRemoval",
            success=first_error is None,
            user_id=user_id,
            device_id=device_id,
            is_automated=is_automated,
        )

        if first_error is not None:
            raise first_error

    async def remove_device(self, user_id: str, device_id: str) -> None:
        await self.unified_device_removal(user_id, device_id, is_automated=False)

    async def remove_inactive_devices(self) -> int:
        cutoff = self.clock.now_utc() - timedelta(days=self.inactivity_days)
        inactive = await self.device_store.list_inactive(cutoff)

        removed = 0
        for device in inactive:
            try:
                await self.unified_device_removal(device.user_id, device.device_id, is_automated=True)
                removed += 1
            except Exception as e:
                logger.error(
                    "inactive_device_removal_failed",
                    user_id=device.user_id,
                    device_id=device.device_id,
                    error=str(e),
                )

        logger.info("inactive_devices_removed", removed=removed, found=len(inactive))
        return removed

    async def _last_check(self) -> Optional[datetime]:
        raw = await self.kv_store.get_item(LAST_CHECK_KEY)
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            logger.warning("last_device_check_unreadable", value=raw)
            return None

    async def perform_periodic_check(self) -> bool:
        """Run the inactivity sweep if due; True when it ran"""
        if not self.enabled:
            return False

        try:
            now = self.clock.now_utc()
            last_check = await self._last_check()
            if last_check is not None and now - last_check < timedelta(hours=self.check_interval_hours):
                return False

            removed = await self.remove_inactive_devices()
            await self.kv_store.set_item(LAST_CHECK_KEY, now.isoformat())
        except Exception as e:
            logger.error("periodic_device_check_failed", error=str(e))
            await self.telemetry.record("periodicCheck", success=False, error=str(e))
            return False

        await self.telemetry.record("periodicCheck", success=True, removed=removed)
        return True

    async def sign_in(self, user_id: str, device_id: str):
        """Register the device, open its session and run the due checks"""
        device = await self.add_device(user_id, device_id)
        session = await self.session_provider.open_session(user_id, device_id)
        await self.perform_periodic_check()
        return device, session

    async def sign_out(self, user_id: str, device_id: str) -> None:
        await self.unified_device_removal(user_id, device_id)

"""Composition root - wires stores, services and schedulers together"""
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, List, Optional

import structlog

from config import Settings
from domain.clock import EstateClock
from domain.services import (
    DeviceSessionManager,
    DeviceTelemetry,
    ExpirationSweeper,
    InviteLifecycleEngine,
    InviteService,
    TransitionNotifier,
)
from infrastructure.local_storage import JsonFileKeyValueStore
from infrastructure.realtime import ChangeFeed
from infrastructure.scheduler import PeriodicTask
from infrastructure.stores import (
    DatabaseSessionProvider,
    DeviceStore,
    InviteStore,
    NotificationStore,
)

logger = structlog.get_logger()


@dataclass
class AccessCore:
    settings: Settings
    clock: EstateClock
    change_feed: ChangeFeed
    invite_store: InviteStore
    notification_store: NotificationStore
    device_store: DeviceStore
    session_provider: DatabaseSessionProvider
    lifecycle: InviteLifecycleEngine
    invites: InviteService
    sweeper: ExpirationSweeper
    devices: DeviceSessionManager
    tasks: List[PeriodicTask] = field(default_factory=list)

    def start_schedulers(self) -> None:
        for task in self.tasks:
            task.start()

    async def stop_schedulers(self) -> None:
        for task in self.tasks:
            await task.stop()


def build_access_core(
    settings: Settings,
    session_maker: Callable,
    *,
    kv_store=None,
    clock: Optional[EstateClock] = None,
    change_feed: Optional[ChangeFeed] = None,
) -> AccessCore:
    clock = clock or EstateClock(settings.estate_timezone)
    change_feed = change_feed or ChangeFeed()
    kv_store = kv_store or JsonFileKeyValueStore(settings.local_state_path)

    invite_store = InviteStore(session_maker, change_feed)
    notification_store = NotificationStore(session_maker, change_feed)
    device_store = DeviceStore(session_maker)
    session_provider = DatabaseSessionProvider(session_maker, now=clock.now_utc)

    lifecycle = InviteLifecycleEngine(
        invite_store,
        TransitionNotifier(notification_store),
        clock,
        scheme=settings.scan_uri_scheme,
        max_retries=settings.transition_max_retries,
    )
    sweeper = ExpirationSweeper(invite_store, clock)
    devices = DeviceSessionManager(
        device_store,
        session_provider,
        kv_store,
        clock,
        device_limit=settings.device_limit,
        inactivity_days=settings.device_inactivity_days,
        check_interval_hours=settings.device_check_interval_hours,
        enabled=settings.enable_device_management,
        telemetry=DeviceTelemetry(kv_store),
    )

    tasks = [
        PeriodicTask(
            "invite-expiry-sweep",
            timedelta(minutes=settings.invite_sweep_interval_minutes),
            sweeper.sweep_expired,
        ),
        PeriodicTask(
            "device-inactivity-check",
            timedelta(minutes=settings.device_check_tick_minutes),
            devices.perform_periodic_check,
        ),
    ]

    logger.info("access_core_built", estate_timezone=settings.estate_timezone)
    return AccessCore(
        settings=settings,
        clock=clock,
        change_feed=change_feed,
        invite_store=invite_store,
        notification_store=notification_store,
        device_store=device_store,
        session_provider=session_provider,
        lifecycle=lifecycle,
        invites=InviteService(invite_store, clock),
        sweeper=sweeper,
        devices=devices,
        tasks=tasks,
    )

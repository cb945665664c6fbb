"""Expiration sweeper - removes invites that were never used"""
import structlog

from domain.clock import EstateClock

logger = structlog.get_logger()


class ExpirationSweeper:
    def __init__(self, store, clock: EstateClock):
        self.store = store
        self.clock = clock

    async def sweep_expired(self) -> int:
        now = self.clock.now_local()
        deleted = await self.store.delete_expired_pending(now)
        total = sum(deleted.values())
        logger.info(
            "expired_invites_swept",
            total=total,
            **{kind.value: count for kind, count in deleted.items()},
        )
        return total

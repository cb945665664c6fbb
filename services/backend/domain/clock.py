"""Estate clock - resolves "now" against the estate's fixed time zone."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo


class EstateClock:
    def __init__(self, tz: str):
        self.tz = ZoneInfo(tz)

    def now_local(self) -> datetime:
        """Estate-local wall clock without tzinfo, comparable with invite windows."""
        return datetime.now(self.tz).replace(tzinfo=None)

    def now_utc(self) -> datetime:
        """Naive UTC, for columns stored as TIMESTAMP WITHOUT TIME ZONE."""
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def to_local(self, dt: datetime) -> datetime:
        # Naive input is assumed to be estate-local already
        if dt.tzinfo is None:
            return dt
        return dt.astimezone(self.tz).replace(tzinfo=None)

"""Device management telemetry kept in installation-local state"""
import json
from datetime import datetime
from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger()

TELEMETRY_KEY = "device_management_telemetry"


class DeviceTelemetry:
    """Success/failure counters per event, e.g. deviceRemoval and periodicCheck"""

    def __init__(self, kv_store, key: str = TELEMETRY_KEY):
        self.kv_store = kv_store
        self.key = key

    async def _load(self) -> Dict[str, Any]:
        raw = await self.kv_store.get_item(self.key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("device_telemetry_corrupt", key=self.key)
            return {}
        return data if isinstance(data, dict) else {}

    async def record(self, event: str, success: bool, **details: Any) -> None:
        try:
            data = await self._load()
            entry = data.get(event) or {"success": 0, "failure": 0}
            entry["success" if success else "failure"] += 1
            entry["last_recorded_at"] = datetime.utcnow().isoformat()
            data[event] = entry
            await self.kv_store.set_item(self.key, json.dumps(data))
        except Exception as e:
            # Telemetry never breaks device management
            logger.warning("device_telemetry_write_failed", telemetry_event=event, error=str(e))
            return

        logger.info("device_management_event", telemetry_event=event, success=success, **details)

    async def summary(self, event: str) -> Optional[Dict[str, Any]]:
        data = await self._load()
        entry = data.get(event)
        if not entry:
            return None
        total = entry["success"] + entry["failure"]
        return {
            **entry,
            "total": total,
            "success_rate": entry["success"] * 100.0 / total if total else 0.0,  # percent
        }

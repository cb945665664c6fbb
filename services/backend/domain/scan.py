"""Scan payloads - what the security desk hands to the lifecycle engine.

A QR pass encodes ``gatekeeper://invite?id=<uuid>&otp=<6 digits>``; manual
entry supplies only the OTP. Anything that does not parse as a URI with the
pass scheme is treated as a bare OTP.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union
from urllib.parse import parse_qs, urlencode, urlsplit

DEFAULT_SCHEME = "gatekeeper"


@dataclass(frozen=True)
class ScanPayload:
    otp: Optional[str] = None
    invite_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.otp and not self.invite_id


ScanIdentifier = Union[str, ScanPayload, Mapping[str, Any]]


def _first(params: Mapping[str, list], key: str) -> Optional[str]:
    values = params.get(key) or []
    return values[0].strip() if values and values[0].strip() else None


def parse_scan_identifier(identifier: ScanIdentifier, scheme: str = DEFAULT_SCHEME) -> ScanPayload:
    if isinstance(identifier, ScanPayload):
        return identifier

    if isinstance(identifier, Mapping):
        invite_id = identifier.get("id")
        otp = identifier.get("otp")
        return ScanPayload(
            otp=str(otp).strip() if otp else None,
            invite_id=str(invite_id).strip() if invite_id else None,
        )

    raw = str(identifier).strip()
    try:
        parts = urlsplit(raw)
    except ValueError:
        return ScanPayload(otp=raw)

    if parts.scheme != scheme:
        return ScanPayload(otp=raw)

    params = parse_qs(parts.query)
    return ScanPayload(otp=_first(params, "otp"), invite_id=_first(params, "id"))


def build_scan_uri(invite_id: Any, otp: str, scheme: str = DEFAULT_SCHEME) -> str:
    return f"{scheme}://invite?{urlencode({'id': str(invite_id), 'otp': otp})}"

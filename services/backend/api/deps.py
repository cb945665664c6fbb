"""Shared FastAPI dependencies"""
from typing import Optional

from fastapi import Header, Request

from infrastructure.container import AccessCore


def get_access_core(request: Request) -> AccessCore:
    return request.app.state.access_core


def get_estate_id(
    x_estate_id: Optional[str] = Header(None, description="Estate to scope the listing to"),
) -> Optional[str]:
    """Optional estate scope for security-side listings"""
    return x_estate_id

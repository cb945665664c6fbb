"""AuthSession model - live authentication session of one device."""
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field


class AuthSessionBase(SQLModel):
    user_id: str = Field(index=True)
    device_id: str = Field(index=True)
    revoked_at: Optional[datetime] = None  # live while NULL


class AuthSession(AuthSessionBase, table=True):
    __tablename__ = "auth_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class AuthSessionRead(AuthSessionBase):
    id: UUID
    created_at: datetime

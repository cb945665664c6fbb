"""Notification model - resident inbox entries"""
from typing import Dict, Any
from datetime import datetime
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON
from uuid import UUID, uuid4


class NotificationBase(SQLModel):
    user_id: str = Field(index=True)

    notification_type: str = Field(default="invite")  # 'invite', 'device', 'system'
    title: str
    message: str

    read: bool = Field(default=False)

    extra_data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))


class Notification(NotificationBase, table=True):
    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class NotificationRead(NotificationBase):
    id: UUID
    created_at: datetime

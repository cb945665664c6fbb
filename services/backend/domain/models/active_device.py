"""ActiveDevice model - an account bound to one authorized client installation."""
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class ActiveDeviceBase(SQLModel):
    user_id: str = Field(index=True)
    device_id: str = Field(index=True)  # stable per installation
    last_login: datetime = Field(default_factory=datetime.utcnow, index=True)


class ActiveDevice(ActiveDeviceBase, table=True):
    __tablename__ = "active_devices"
    __table_args__ = (
        UniqueConstraint("user_id", "device_id", name="uq_active_devices_user_device"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)


class ActiveDeviceCreate(SQLModel):
    user_id: str = Field(min_length=1)
    device_id: str = Field(min_length=1)


class ActiveDeviceRead(ActiveDeviceBase):
    id: UUID

"""Authentication session provider backed by the auth_sessions collection"""
from datetime import datetime
from typing import Callable, Optional, Protocol

from sqlalchemy import update
from sqlmodel import select

from domain.models.auth_session import AuthSession


class AuthSessionProvider(Protocol):
    async def open_session(self, user_id: str, device_id: str) -> AuthSession:
        ...

    async def get_current_session(self, user_id: str, device_id: str) -> Optional[AuthSession]:
        ...

    async def sign_out(self, user_id: str, device_id: str) -> int:
        ...


class DatabaseSessionProvider:
    def __init__(self, session_maker: Callable, now: Callable[[], datetime] = datetime.utcnow):
        self._session_maker = session_maker
        self._now = now

    async def open_session(self, user_id: str, device_id: str) -> AuthSession:
        auth_session = AuthSession(user_id=user_id, device_id=device_id, created_at=self._now())
        async with self._session_maker() as session:
            session.add(auth_session)
            await session.commit()
            await session.refresh(auth_session)
        return auth_session

    async def get_current_session(self, user_id: str, device_id: str) -> Optional[AuthSession]:
        async with self._session_maker() as session:
            query = (
                select(AuthSession)
                .where(
                    AuthSession.user_id == user_id,
                    AuthSession.device_id == device_id,
                    AuthSession.revoked_at.is_(None),
                )
                .order_by(AuthSession.created_at.desc())
                .limit(1)
            )
            result = await session.execute(query)
            return result.scalars().first()

    async def sign_out(self, user_id: str, device_id: str) -> int:
        """Revoke every live session of the device; returns how many were live"""
        stmt = (
            update(AuthSession)
            .where(
                AuthSession.user_id == user_id,
                AuthSession.device_id == device_id,
                AuthSession.revoked_at.is_(None),
            )
            .values(revoked_at=self._now())
            .execution_options(synchronize_session=False)
        )
        async with self._session_maker() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount or 0

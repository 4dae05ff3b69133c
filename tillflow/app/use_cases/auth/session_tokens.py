import secrets
from datetime import datetime, timedelta
from typing import Tuple

from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import hash_token
from tillflow.domain.entities import Role, Session, User
from .dtos import IssuedSession, UserInfo

SESSION_TOKEN_BYTES = 32


async def create_session(
    uow: UnitOfWork, user: User, now: datetime, ttl_days: int
) -> Tuple[str, Session]:
    """Persist a new session for ``user`` and return the raw token with it"""
    token = secrets.token_hex(SESSION_TOKEN_BYTES)
    session = Session(
        token_hash=hash_token(token),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(days=ttl_days),
    )
    session = await uow.sessions.create(session)
    return token, session


def issued_session(token: str, session: Session, user: User) -> IssuedSession:
    return IssuedSession(
        token=token,
        session_id=str(session.id),
        expires_at=session.expires_at,
        user=UserInfo(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=Role(user.role).value,
            business_id=str(user.business_id),
        ),
    )

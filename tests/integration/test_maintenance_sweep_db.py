from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tillflow.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tillflow.app.services.maintenance import MaintenanceSweeper
from tillflow.domain.base import hash_token
from tillflow.domain.entities import AuditLog, Business, Role, Session, User

NOW = datetime(2025, 8, 31, 12, 0, 0)


async def _seed(db_session):
    ours = Business(name="Mensah Provisions")
    theirs = Business(name="Boateng Hardware")
    db_session.add_all([ours, theirs])
    await db_session.flush()

    user = User(
        business_id=ours.id,
        email="owner@shop.example",
        name="Ama",
        password_hash="x" * 60,
        role=Role.owner,
    )
    db_session.add(user)
    await db_session.flush()

    db_session.add_all(
        [
            Session(token_hash=hash_token("expired"), user_id=user.id, expires_at=NOW - timedelta(seconds=1)),
            Session(token_hash=hash_token("live"), user_id=user.id, expires_at=NOW + timedelta(days=3)),
        ]
    )

    def entry(business, created_at, action):
        return AuditLog(
            business_id=business.id,
            user_role="OWNER",
            action=action,
            created_at=created_at,
        )

    db_session.add_all(
        [
            entry(ours, datetime(2025, 2, 27, 23, 59), "OURS_OLD"),
            entry(ours, datetime(2025, 2, 28, 12, 0), "OURS_KEEP"),
            entry(theirs, datetime(2024, 1, 1), "THEIRS_OLD"),
        ]
    )
    await db_session.commit()
    return ours


def _sweeper(engine):
    SessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return MaintenanceSweeper(
        lambda: SqlAlchemyUnitOfWork(SessionLocal(), close_on_exit=True),
        retention_months=6,
        clock=lambda: NOW,
    )


@pytest.mark.asyncio
async def test_sweep_removes_expired_sessions_and_old_audit_for_one_business(engine, db_session):
    ours = await _seed(db_session)

    await _sweeper(engine).cleanup_stale_data(ours.id)

    hashes = (await db_session.exec(select(Session.token_hash))).all()
    assert hashes == [hash_token("live")]
    actions = sorted((await db_session.exec(select(AuditLog.action))).all())
    assert actions == ["OURS_KEEP", "THEIRS_OLD"]


@pytest.mark.asyncio
async def test_scheduled_sweeps_overlap_safely(engine, db_session):
    ours = await _seed(db_session)
    sweeper = _sweeper(engine)

    sweeper.schedule(ours.id)
    sweeper.schedule(ours.id)
    await sweeper.drain()

    hashes = (await db_session.exec(select(Session.token_hash))).all()
    assert hashes == [hash_token("live")]

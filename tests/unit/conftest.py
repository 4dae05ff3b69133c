from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import Role, User

from tests.unit.helpers import PASSWORD_HASH


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.businesses = MagicMock()
    uow.businesses.create = AsyncMock(side_effect=lambda business: business)

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_id_in_business = AsyncMock(return_value=None)
    uow.users.list_by_business = AsyncMock(return_value=[])
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.list_pin_approvers = AsyncMock(return_value=[])

    uow.sessions = MagicMock()
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.get_with_user_by_token_hash = AsyncMock(return_value=None)
    uow.sessions.delete_by_token_hash = AsyncMock(return_value=0)
    uow.sessions.delete_expired = AsyncMock(return_value=0)
    uow.sessions.delete_all_by_user_id = AsyncMock(return_value=0)
    uow.sessions.delete_all_except = AsyncMock(return_value=0)

    uow.audit_logs = MagicMock()
    uow.audit_logs.create = AsyncMock(side_effect=lambda entry: entry)
    uow.audit_logs.delete_older_than = AsyncMock(return_value=0)
    uow.audit_logs.get_by_business_paginated = AsyncMock(return_value=([], None))

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.update = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.mark_unused_as_used = AsyncMock(return_value=0)

    return uow


@pytest.fixture
def make_user():
    def _make(**overrides) -> User:
        fields = dict(
            id=uuid4(),
            business_id=uuid4(),
            email="ama@shop.example",
            name="Ama Mensah",
            password_hash=PASSWORD_HASH,
            role=Role.cashier,
            active=True,
        )
        fields.update(overrides)
        return User(**fields)

    return _make


@pytest.fixture
def signed_in():
    """AuthenticatedUser snapshot for a given User entity"""

    def _signed_in(user: User, session_id=None) -> AuthenticatedUser:
        return AuthenticatedUser(
            id=user.id,
            business_id=user.business_id,
            email=user.email,
            name=user.name,
            role=user.role,
            active=user.active,
            two_factor_enabled=user.two_factor_enabled,
            session_id=session_id or uuid4(),
        )

    return _signed_in

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from tillflow.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tillflow.app.services.login_throttle import LoginThrottle
from tillflow.depends import (
    get_email_service,
    get_login_throttle,
    get_maintenance_sweeper,
    get_pin_throttle,
    get_unit_of_work,
)

from tests.integration.helpers import OWNER


class RecordingSweeper:
    """Stands in for the background sweep so requests never race it"""

    def __init__(self):
        self.scheduled = []

    def schedule(self, business_id):
        self.scheduled.append(business_id)

    async def drain(self):
        pass


class RecordingMailer:
    """Keeps reset links instead of sending them"""

    def __init__(self):
        self.sent = []

    def send_password_reset(self, to_email, reset_url, user_name):
        self.sent.append((to_email, reset_url))
        return True


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def throttle():
    return LoginThrottle(window_seconds=900, max_attempts=3, lockout_seconds=900)


@pytest.fixture
def pin_throttle():
    return LoginThrottle(window_seconds=900, max_attempts=3, lockout_seconds=900)


@pytest.fixture
def sweeper():
    return RecordingSweeper()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest_asyncio.fixture
async def client(db_session, throttle, pin_throttle, sweeper, mailer):
    from tillflow.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_login_throttle] = lambda: throttle
    app.dependency_overrides[get_maintenance_sweeper] = lambda: sweeper
    app.dependency_overrides[get_email_service] = lambda: mailer
    app.dependency_overrides[get_pin_throttle] = lambda: pin_throttle

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def owner_client(client):
    """Client signed in as a freshly registered owner"""
    response = await client.post("/api/auth/register", json=OWNER)
    assert response.status_code == 201
    return client

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from tillflow.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tillflow.app.services.login_throttle import LoginThrottle
from tillflow.app.services.mailer import EmailService
from tillflow.app.services.maintenance import MaintenanceSweeper

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def new_unit_of_work() -> SqlAlchemyUnitOfWork:
    """Unit of work owning a fresh session, for work that outlives the request"""
    return SqlAlchemyUnitOfWork(AsyncSessionLocal(), close_on_exit=True)


login_throttle = LoginThrottle(
    window_seconds=ApplicationConfig.LOGIN_THROTTLE_WINDOW_SECONDS,
    max_attempts=ApplicationConfig.LOGIN_THROTTLE_MAX_ATTEMPTS,
    lockout_seconds=ApplicationConfig.LOGIN_THROTTLE_LOCKOUT_SECONDS,
)


maintenance_sweeper = MaintenanceSweeper(
    new_unit_of_work,
    retention_months=ApplicationConfig.AUDIT_RETENTION_MONTHS,
    timeout_seconds=ApplicationConfig.MAINTENANCE_TIMEOUT_SECONDS,
)


def get_login_throttle() -> LoginThrottle:
    return login_throttle


def get_maintenance_sweeper() -> MaintenanceSweeper:
    return maintenance_sweeper


email_service = EmailService(
    smtp_host=ApplicationConfig.SMTP_HOST,
    smtp_port=ApplicationConfig.SMTP_PORT,
    smtp_user=ApplicationConfig.SMTP_USER,
    smtp_password=ApplicationConfig.SMTP_PASSWORD,
    smtp_use_tls=ApplicationConfig.SMTP_USE_TLS,
    from_address=ApplicationConfig.MAIL_FROM,
)


def get_email_service() -> EmailService:
    return email_service


pin_throttle = LoginThrottle(
    window_seconds=ApplicationConfig.LOGIN_THROTTLE_WINDOW_SECONDS,
    max_attempts=ApplicationConfig.LOGIN_THROTTLE_MAX_ATTEMPTS,
    lockout_seconds=ApplicationConfig.LOGIN_THROTTLE_LOCKOUT_SECONDS,
)


def get_pin_throttle() -> LoginThrottle:
    return pin_throttle

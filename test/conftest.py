"""
Pytest configuration and fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from circle.auth.jwt import JWTHandler
from circle.auth.models import User
from circle.config import Settings, get_settings
from circle.contacts.models import Contact, ContactEmail, ContactPhone, EmailType, PhoneType
from circle.main import app
from circle.shared.database import Base, get_db_session


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        app_env="dev",
        debug=True,
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key-for-testing-only",
        jwt_access_token_expire_minutes=60,
        import_max_bytes=64 * 1024,
    )


@pytest_asyncio.fixture
async def db_engine(test_settings: Settings) -> AsyncGenerator[Any, None]:
    """Create test database engine."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: Any) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create test user in database."""
    user = User(id=uuid4(), email="owner@example.com", name="Owner User")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second user who owns nothing of test_user's."""
    user = User(id=uuid4(), email="other@example.com", name="Other User")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def saved_contacts(db_session: AsyncSession, test_user: User) -> list[Contact]:
    """Two contacts for test_user: one with two emails, one with none."""
    contacts = [
        Contact(
            user_id=test_user.id,
            first_name="Jane",
            last_name="Doe",
            title="Engineer",
            emails=[
                ContactEmail(email="jane@work.com", type=EmailType.WORK),
                ContactEmail(email="jane@home.org", type=EmailType.PERSONAL),
            ],
            phones=[ContactPhone(phone_number="+1 555 0100", type=PhoneType.HOME)],
        ),
        Contact(
            user_id=test_user.id,
            first_name="John",
            last_name="Smith",
            title=None,
            emails=[],
            phones=[
                ContactPhone(phone_number="555-0199", type=PhoneType.WORK),
                ContactPhone(phone_number="555-0142", type=PhoneType.OTHER),
            ],
        ),
    ]
    db_session.add_all(contacts)
    await db_session.commit()
    return contacts


@pytest.fixture
def count_contacts(db_session: AsyncSession) -> Callable[[], Awaitable[int]]:
    """Counter for every contact row, regardless of owner."""

    async def _count() -> int:
        result = await db_session.execute(select(func.count(Contact.id)))
        return result.scalar() or 0

    return _count


@pytest.fixture
def jwt_handler(test_settings: Settings) -> JWTHandler:
    """Create JWT handler with test settings."""
    return JWTHandler(settings=test_settings)


@pytest.fixture
def auth_headers(jwt_handler: JWTHandler, test_user: User) -> dict[str, str]:
    """Bearer headers for test_user."""
    token = jwt_handler.create_access_token(user_id=test_user.id, email=test_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def async_client(
    db_session: AsyncSession,
    test_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

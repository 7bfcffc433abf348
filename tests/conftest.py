"""
Pytest configuration and fixtures
"""
import os

# Point the application at SQLite before config/database are imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from app.core.rate_limit import rate_limiter
from app.models import HealthDeclaration, DeclarationStatus


# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:"
)


@pytest.fixture(scope="function")
async def session_maker() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Fresh schema on a dedicated engine for each test
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {},
        poolclass=StaticPool if "sqlite" in TEST_DATABASE_URL else None,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session
    """
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for the app with get_db bound to the test database
    """
    from main import app

    async def override_get_db():
        async with session_maker() as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Each test starts with an empty throttle window"""
    original_limit = rate_limiter.limit
    rate_limiter.reset()
    yield
    rate_limiter.limit = original_limit
    rate_limiter.reset()


@pytest.fixture
def make_declaration(db_session: AsyncSession):
    """
    Insert a declaration directly, bypassing validation, with controllable timestamps
    """
    async def _make(
        name: str = "John Doe",
        temperature: str = "36.5",
        symptoms: str = None,
        contact_details: str = None,
        status: DeclarationStatus = DeclarationStatus.PENDING,
        created_at: datetime = None,
    ) -> HealthDeclaration:
        declaration = HealthDeclaration(
            name=name,
            temperature=Decimal(temperature),
            has_symptoms=symptoms is not None,
            symptoms=symptoms,
            has_contact=contact_details is not None,
            contact_details=contact_details,
            status=status,
        )
        if created_at is not None:
            declaration.created_at = created_at
            declaration.updated_at = created_at
        db_session.add(declaration)
        # Python-side defaults (id, timestamps) are already populated after flush
        await db_session.commit()
        return declaration

    return _make


@pytest.fixture
def valid_payload() -> dict:
    """
    A submission that passes every rule
    """
    return {
        "name": "John Doe",
        "temperature": 36.5,
        "hasSymptoms": False,
        "hasContact": False,
    }

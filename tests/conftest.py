from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from trek import schemas
from trek.config import config
from trek.database import get_db, install_sqlite_support
from trek.main import app
from trek.models import Base, Category, Map, User
from trek.routes.auth import get_current_user, require_auth


@pytest.fixture
async def session_factory(
    tmp_path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    install_sqlite_support(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    original_data_root = config.DATA_ROOT
    config.DATA_ROOT = tmp_path / "data"
    config.ensure_data_dirs()

    yield async_sessionmaker(engine, expire_on_commit=False)

    config.DATA_ROOT = original_data_root
    await engine.dispose()


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded(
    session_factory: async_sessionmaker[AsyncSession],
) -> tuple[int, int, int]:
    """A user owning one map that has one red category."""
    async with session_factory() as session:
        user = User(name="tester", email="tester@example.com")
        session.add(user)
        await session.commit()
        await session.refresh(user)

        sample_map = Map(title="Sample Map", user_id=user.id)
        session.add(sample_map)
        await session.commit()
        await session.refresh(sample_map)

        category = Category(title="Food", color="#ff0000", map_id=sample_map.id)
        session.add(category)
        await session.commit()
        await session.refresh(category)

        return user.id, sample_map.id, category.id


def _override_db(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
async def test_client(
    session_factory: async_sessionmaker[AsyncSession],
    seeded: tuple[int, int, int],
) -> AsyncGenerator[
    tuple[AsyncClient, async_sessionmaker[AsyncSession], int, int, int]
]:
    user_id, map_id, category_id = seeded
    _override_db(session_factory)

    auth_user = schemas.User(id=user_id, name="tester", email="tester@example.com")

    async def override_auth() -> schemas.User:
        return auth_user

    app.dependency_overrides[require_auth] = override_auth
    app.dependency_overrides[get_current_user] = override_auth

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client, session_factory, user_id, map_id, category_id

    app.dependency_overrides.clear()


@pytest.fixture
async def anonymous_client(
    session_factory: async_sessionmaker[AsyncSession],
    seeded: tuple[int, int, int],
) -> AsyncGenerator[AsyncClient]:
    """Client with the real session-cookie authentication."""
    _override_db(session_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

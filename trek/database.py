"""Database session management."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from trek.config import config
from trek.models.geometry import (
    make_point,
    point_x,
    point_y,
    register_geometry_column,
    set_srid,
)

logger = logging.getLogger(__name__)

_MIGRATION_LOCK = config.DATA_ROOT / ".migrations.lock"
_LOCK_TIMEOUT_SECONDS = 30.0
_LOCK_RETRY_INTERVAL = 0.1


def _to_async_url(url: str) -> str:
    if url.startswith("sqlite+aiosqlite:"):
        return url
    if url.startswith("sqlite:"):
        return url.replace("sqlite:", "sqlite+aiosqlite:", 1)
    if url.startswith("postgresql+asyncpg:"):
        return url
    if url.startswith("postgresql:"):
        return url.replace("postgresql:", "postgresql+asyncpg:", 1)
    if url.startswith("postgres:"):
        return url.replace("postgres:", "postgresql+asyncpg:", 1)
    return url


def _to_sync_url(url: str) -> str:
    if url.startswith("sqlite+aiosqlite:"):
        url = url.replace("sqlite+aiosqlite:", "sqlite:", 1)
    elif url.startswith("postgresql+asyncpg:"):
        url = url.replace("postgresql+asyncpg:", "postgresql:", 1)
    elif url.startswith("postgres:"):
        url = url.replace("postgres:", "postgresql:", 1)

    if url.startswith("sqlite:///") and ":memory:" not in url:
        db_path = Path(url.replace("sqlite:///", "", 1)).expanduser().resolve()
        return f"sqlite:///{db_path}"

    return url


def _on_sqlite_connect(dbapi_connection: Any, connection_record: Any) -> None:
    """Enable FK enforcement and provide the spatial functions markers use."""

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

    dbapi_connection.create_function("ST_MakePoint", 2, make_point)
    dbapi_connection.create_function("ST_SetSRID", 2, set_srid)
    dbapi_connection.create_function("ST_X", 1, point_x)
    dbapi_connection.create_function("ST_Y", 1, point_y)
    dbapi_connection.create_function(
        "RecoverGeometryColumn", -1, register_geometry_column
    )
    dbapi_connection.create_function("CreateSpatialIndex", -1, register_geometry_column)


def install_sqlite_support(engine: AsyncEngine | Engine) -> None:
    """Register the SQLite connect hook on ``engine`` if it talks to SQLite."""

    sync_engine = engine.sync_engine if isinstance(engine, AsyncEngine) else engine
    if sync_engine.dialect.name != "sqlite":
        return
    event.listen(sync_engine, "connect", _on_sqlite_connect)


database_url = _to_async_url(config.DATABASE_URL)

engine = create_async_engine(database_url, pool_pre_ping=True)
install_sqlite_support(engine)
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Get database session."""
    async with AsyncSessionLocal() as session:
        yield session


def alembic_config(sync_url: str) -> AlembicConfig:
    """Build an Alembic config pointing at the bundled migrations."""

    alembic_cfg = AlembicConfig(str(Path(__file__).resolve().parent / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_url)
    return alembic_cfg


async def init_db() -> None:
    """Initialize the database by applying migrations."""

    def _run_upgrade() -> None:
        sync_url = _to_sync_url(config.DATABASE_URL)
        alembic_cfg = alembic_config(sync_url)

        lock_fd: int | None = None
        try:
            try:
                lock_fd = _acquire_lock(_MIGRATION_LOCK)
            except TimeoutError as exc:  # pragma: no cover - lock contention
                logger.error("Failed to acquire migration lock: %s", exc)
                raise

            sync_engine = create_engine(sync_url)
            try:
                with sync_engine.connect() as connection:
                    inspector = inspect(connection)
                    has_version_table = inspector.has_table("alembic_version")
                    existing_tables = [
                        name
                        for name in inspector.get_table_names()
                        if name != "alembic_version"
                    ]

                if not has_version_table and existing_tables:
                    logger.info(
                        "Stamping existing database with current Alembic head",
                    )
                    command.stamp(alembic_cfg, "head")
                else:
                    command.upgrade(alembic_cfg, "head")
            finally:
                sync_engine.dispose()
        finally:
            if lock_fd is not None:
                _release_lock(lock_fd, _MIGRATION_LOCK)

    await asyncio.to_thread(_run_upgrade)


def _acquire_lock(lock_path: Path) -> int:
    """Acquire a simple file-based lock for migration execution."""

    lock_path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + _LOCK_TIMEOUT_SECONDS
    while True:
        try:
            return os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_RDWR)
        except FileExistsError:
            if time.monotonic() > deadline:
                raise TimeoutError("Timed out waiting for migration lock")
            time.sleep(_LOCK_RETRY_INTERVAL)


def _release_lock(fd: int, lock_path: Path) -> None:
    """Release the lock acquired with :func:`_acquire_lock`."""

    os.close(fd)
    try:
        lock_path.unlink()
    except FileNotFoundError:
        pass

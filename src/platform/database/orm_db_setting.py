"""
SQLAlchemy async engine and session management

- AsyncEngineManager keeps the engine bound to the running event loop, so test
  suites that spin a fresh loop per test never reuse a pool from a dead loop.
- Every ledger write opens its own short session; nothing here is shared
  across requests.
- SQLite (used by the test suite) gets a busy timeout instead of pool sizing,
  so concurrent conditional UPDATEs queue on the file lock rather than fail.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class AsyncEngineManager:
    def __init__(self, url: Optional[str] = None) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url or settings.DATABASE_URL

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('[DB] Event loop changed, dropping engine bound to the old loop')
                self._session_maker = None
            Logger.base.info(f'[DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        return self._engine  # type: ignore[return-value]

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )
        return self._session_maker

    def reset(self, url: Optional[str] = None) -> None:
        """Point the manager at another database (tests use one file per test)."""
        self._url = url
        self._engine = None
        self._loop = None
        self._session_maker = None

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._loop = None
        self._session_maker = None

    def _create_engine(self) -> AsyncEngine:
        kwargs: dict[str, Any] = {'echo': False}
        if self.url.startswith('sqlite'):
            kwargs['connect_args'] = {'timeout': settings.DB_POOL_TIMEOUT}
        else:
            kwargs |= {
                'pool_size': settings.DB_POOL_SIZE,
                'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
                'pool_timeout': settings.DB_POOL_TIMEOUT,
                'pool_recycle': settings.DB_POOL_RECYCLE,
                'pool_pre_ping': settings.DB_POOL_PRE_PING,
            }
        return create_async_engine(self.url, **kwargs)


engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return engine_manager.get_session_maker()


class Base(DeclarativeBase):
    pass


async def create_db_and_tables() -> None:
    """Create tables if they don't exist"""
    # Register every mapped table on Base.metadata before create_all
    import src.service.booking.driven_adapter.model.booking_model  # noqa: F401
    import src.service.reservation.driven_adapter.model.seat_model  # noqa: F401
    import src.service.reservation.driven_adapter.model.trip_model  # noqa: F401
    import src.service.shared_kernel.driven_adapter.model.user_model  # noqa: F401

    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except Exception as e:
        error_msg = str(e).lower()
        if any(keyword in error_msg for keyword in ['already exists', 'duplicate key']):
            Logger.base.info('[DB] Tables already exist, skipping creation')
        else:
            Logger.base.error(f'[DB] Error creating tables: {e}')
            raise


class Database:
    """Session factory handed to repositories through the DI container"""

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with get_session_maker()() as session:
            yield session

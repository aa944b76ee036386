import logging

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the engine and session factory for one process.

    Lifecycle: connect() at startup (creates missing tables), ping() for
    health checks, dispose() at shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def connected(self) -> bool:
        return self._engine is not None

    async def connect(self):
        if self._engine is not None:
            return

        self._engine = create_async_engine(self.url, echo=self.echo, pool_pre_ping=True)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
        )

        # models must be registered on Base before create_all
        from . import models  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("database connected: %s", self._engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("database ping failed")
            return False

    def session(self) -> AsyncSession:
        if self._sessionmaker is None:
            raise RuntimeError("Database.connect() has not been called")
        return self._sessionmaker()

    async def dispose(self):
        if self._engine is None:
            return
        try:
            await self._engine.dispose()
        finally:
            self._engine = None
            self._sessionmaker = None
        logger.info("database connection closed")


async def get_db(request: Request):
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session

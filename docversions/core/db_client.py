"""
Async SQLAlchemy access to the database holding the documents table.

Two ways to connect:
- Cloud SQL Python Connector when USE_CLOUD_SQL_CONNECTOR and
  CLOUD_SQL_INSTANCE are set
- DATABASE_URL (or the DATABASE_* parts) otherwise; sqlite works for tests

asyncpg connections cannot cross event loops, so each running loop gets its
own engine and session factory.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from docversions.core.config import settings
from docversions.core.logging import get_db_logger

logger = get_db_logger()


@dataclass
class _LoopResources:
    engine: AsyncEngine
    sessions: async_sessionmaker
    connector: Optional[Any] = None


def _pool_options() -> Dict[str, Any]:
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


class DatabaseManager:
    """Process-wide engine registry keyed by event loop."""

    _instance: Optional["DatabaseManager"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._loops = {}
        return cls._instance

    @staticmethod
    def _loop_key() -> int:
        try:
            return id(asyncio.get_running_loop())
        except RuntimeError:
            return 0

    async def _resources(self) -> _LoopResources:
        key = self._loop_key()
        resources = self._loops.get(key)
        if resources is None:
            if settings.USE_CLOUD_SQL_CONNECTOR and settings.CLOUD_SQL_INSTANCE:
                engine, connector = self._cloud_sql_engine()
            else:
                engine, connector = self._url_engine(), None

            resources = _LoopResources(
                engine=engine,
                sessions=async_sessionmaker(
                    bind=engine, class_=AsyncSession, expire_on_commit=False
                ),
                connector=connector,
            )
            self._loops[key] = resources
            logger.info(
                "Database engine ready",
                table=settings.DOCUMENTS_TABLE,
                via="cloud_sql_connector" if connector else "url",
            )
        return resources

    def _cloud_sql_engine(self):
        from google.cloud.sql.connector import Connector, IPTypes

        connector = Connector(loop=asyncio.get_running_loop())
        ip_type = IPTypes.PUBLIC if settings.CLOUD_SQL_IP_TYPE == "PUBLIC" else IPTypes.PRIVATE

        async def getconn():
            return await connector.connect_async(
                settings.CLOUD_SQL_INSTANCE,
                "asyncpg",
                user=settings.DATABASE_USER,
                password=settings.DATABASE_PASSWORD,
                db=settings.DATABASE_NAME,
                ip_type=ip_type,
            )

        logger.info(
            "Using Cloud SQL connector",
            instance=settings.CLOUD_SQL_INSTANCE,
            ip_type=settings.CLOUD_SQL_IP_TYPE,
        )
        engine = create_async_engine(
            "postgresql+asyncpg://",
            async_creator=getconn,
            echo=settings.DB_ECHO,
            **_pool_options(),
        )
        return engine, connector

    def _url_engine(self) -> AsyncEngine:
        url = make_url(settings.resolved_database_url)
        # Credentials stay out of the logs
        logger.info("Using database URL", driver=url.drivername, host=url.host, database=url.database)

        if url.get_backend_name() == "sqlite":
            return create_async_engine(url, echo=settings.DB_ECHO)
        return create_async_engine(url, echo=settings.DB_ECHO, **_pool_options())

    async def get_engine_async(self) -> AsyncEngine:
        return (await self._resources()).engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session that commits on clean exit and rolls back on error.

            async with db.session() as session:
                await session.merge(row)
        """
        resources = await self._resources()
        async with resources.sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create the documents table when missing."""
        from docversions.models.base import Base
        import docversions.models.document_item  # noqa: F401

        engine = await self.get_engine_async()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Documents table verified", table=settings.DOCUMENTS_TABLE)

    async def close_all(self) -> None:
        """Dispose this loop's engine and close every connector."""
        current = self._loop_key()
        for key, resources in list(self._loops.items()):
            if key == current:
                await resources.engine.dispose()
            if resources.connector is not None:
                await resources.connector.close_async()
        self._loops.clear()
        logger.info("Database connections closed")


db = DatabaseManager()

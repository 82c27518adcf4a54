"""
Database Configuration and Query Execution

Async engine management and the parameterized ``query`` entry point used by
every repository. SQL is written with ``$1, $2, ...`` positional placeholders
and bound through SQLAlchemy, so values never end up in the statement text.
"""

from typing import Any, Dict, List, Optional, Sequence
import re
import time

from sqlalchemy import bindparam, event, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from jobly.core.config import get_settings
from jobly.utils.logger import get_logger

# Initialize logger
logger = get_logger(__name__)

# Get settings
settings = get_settings()

_POSITIONAL_PARAM = re.compile(r"\$(\d+)")


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


def bind_positional(sql: str, values: Sequence[Any]):
    """
    Turn a ``$n`` statement into a SQLAlchemy ``text`` construct.

    Each ``$n`` becomes the named parameter ``:p<n>`` bound to ``values[n-1]``.

    Raises:
        ValueError: If placeholders and values disagree
    """
    indexes = {int(n) for n in _POSITIONAL_PARAM.findall(sql)}
    if indexes != set(range(1, len(values) + 1)):
        raise ValueError(
            f"Statement expects placeholders {sorted(indexes)} "
            f"but {len(values)} values were given"
        )

    statement = text(_POSITIONAL_PARAM.sub(r":p\1", sql))
    if values:
        statement = statement.bindparams(
            *[bindparam(f"p{idx}", value) for idx, value in enumerate(values, start=1)]
        )
    return statement


class QueryMonitor:
    """Track slow statements against the store."""

    def __init__(self, slow_query_threshold: float) -> None:
        self.slow_query_threshold = slow_query_threshold
        self.stats = {'queries': 0, 'slow_queries': 0}

    def record_query_execution(self, duration: float, sql: str) -> None:
        """Record query execution metrics."""
        self.stats['queries'] += 1

        if duration > self.slow_query_threshold:
            self.stats['slow_queries'] += 1
            logger.warning(
                f"Slow query detected: {duration:.3f}s",
                duration=duration,
                statement=" ".join(sql.split())[:200]
            )


class DatabaseManager:
    """Database connection management and statement execution."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        """Initialize database manager."""
        self.database_url = database_url or settings.get_database_uri()
        self._engine: Optional[AsyncEngine] = None
        self._monitor = QueryMonitor(settings.SLOW_QUERY_THRESHOLD_SECONDS)

    @property
    def engine(self) -> AsyncEngine:
        """Get database engine."""
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call init_database() first.")
        return self._engine

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    async def init_database(self) -> None:
        """Create the engine and check that the store answers."""
        engine_kwargs: Dict[str, Any] = {"echo": settings.DEBUG}

        if self.is_sqlite:
            # One shared connection keeps an in-memory database alive
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
            engine_kwargs["max_overflow"] = settings.DATABASE_MAX_OVERFLOW
            engine_kwargs["pool_pre_ping"] = True

        self._engine = create_async_engine(self.database_url, **engine_kwargs)

        if self.is_sqlite:
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        try:
            async with self._engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection test successful")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    async def create_tables(self) -> None:
        """Create database tables."""
        # Registers every model on Base.metadata
        import jobly.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    async def drop_tables(self) -> None:
        """Drop database tables."""
        import jobly.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped")

    async def query(self, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Run one parameterized statement in its own transaction.

        A pooled connection is checked out for the duration of the call and
        returned afterwards. Store errors (including IntegrityError) propagate
        to the caller.

        Args:
            sql: Statement using ``$n`` placeholders
            values: Bind values, ``values[0]`` fills ``$1``

        Returns:
            List[Dict[str, Any]]: Result rows keyed by column label; empty for
            statements that return nothing
        """
        statement = bind_positional(sql, values)

        start = time.perf_counter()
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(statement)
                rows = [dict(row) for row in result.mappings().all()] if result.returns_rows else []
        except IntegrityError:
            # Repositories turn these into domain errors
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}", statement=" ".join(sql.split())[:200])
            raise
        self._monitor.record_query_execution(time.perf_counter() - start, sql)

        return rows

    def get_stats(self) -> Dict[str, int]:
        """Get query statistics."""
        return dict(self._monitor.stats)

    async def close_connections(self) -> None:
        """Close database connections."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            logger.info("Database engine disposed")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

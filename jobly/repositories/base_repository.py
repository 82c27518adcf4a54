"""
Base Repository Pattern Implementation

Common plumbing for the Jobly repositories: parameterized queries through
the DatabaseManager, key lookups, partial updates and deletes with the
domain error policy (missing rows -> NotFound, constraint conflicts ->
BadRequest).
"""

from abc import ABC, abstractmethod
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from jobly.core.database import DatabaseManager
from jobly.core.exceptions import BadRequestException, NotFoundException
from jobly.utils.logger import get_logger, log_database_operation
from jobly.utils.sql import sql_for_partial_update

logger = get_logger(__name__)


class BaseRepository(ABC):
    """Abstract base repository keyed by a single column."""

    # API field name -> storage column, for names that differ
    column_map: Mapping[str, str] = {}

    # Fields a partial update may touch
    updatable_fields: Collection[str] = frozenset()

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Return the table this repository reads and writes."""
        pass

    @property
    @abstractmethod
    def key_column(self) -> str:
        """Return the primary key column."""
        pass

    @property
    @abstractmethod
    def returning_columns(self) -> str:
        """Select list producing the API-facing row shape."""
        pass

    @abstractmethod
    def not_found(self, key: Any) -> NotFoundException:
        """Build the error raised when ``key`` matches no row."""
        pass

    def shape_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a raw result row into the API-facing shape."""
        return row

    async def query(self, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a statement and return its rows."""
        return await self.db_manager.query(sql, values)

    async def fetch_one(self, sql: str, values: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        """Run a statement and return its first row, if any."""
        rows = await self.query(sql, values)
        return rows[0] if rows else None

    async def exists(self, key: Any) -> bool:
        """Check if a row with this key exists."""
        row = await self.fetch_one(
            f"SELECT {self.key_column} FROM {self.table_name} WHERE {self.key_column} = $1",
            [key]
        )
        return row is not None

    async def update(self, key: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partially update a row; only fields present in ``data`` change.

        Raises:
            BadRequestException: Empty ``data``, a field outside
                ``updatable_fields``, or a constraint violation
            NotFoundException: If no row has this key
        """
        set_cols, values = sql_for_partial_update(
            data, self.column_map, self.updatable_fields
        )
        key_idx = f"${len(values) + 1}"

        sql = (
            f"UPDATE {self.table_name} "
            f"SET {set_cols} "
            f"WHERE {self.key_column} = {key_idx} "
            f"RETURNING {self.returning_columns}"
        )

        try:
            row = await self.fetch_one(sql, [*values, key])
        except IntegrityError as e:
            logger.warning(f"Update of {self.table_name} {key} rejected by store: {e.orig}")
            raise BadRequestException(f"Update conflicts with existing data for: {key}")

        if row is None:
            raise self.not_found(key)

        log_database_operation("update", self.table_name, key, fields=list(data))
        return self.shape_row(row)

    async def remove(self, key: Any) -> None:
        """
        Delete a row by key.

        Raises:
            NotFoundException: If no row has this key
            BadRequestException: If other rows still reference it
        """
        sql = (
            f"DELETE FROM {self.table_name} "
            f"WHERE {self.key_column} = $1 "
            f"RETURNING {self.key_column}"
        )

        try:
            row = await self.fetch_one(sql, [key])
        except IntegrityError as e:
            logger.warning(f"Delete of {self.table_name} {key} rejected by store: {e.orig}")
            raise BadRequestException(f"Cannot remove {key}: other records still reference it")

        if row is None:
            raise self.not_found(key)

        log_database_operation("delete", self.table_name, key)

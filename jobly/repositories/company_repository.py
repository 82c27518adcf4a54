"""
Company Repository Implementation

Repository for company records: creation with duplicate detection,
filtered listing, lookup with the company's jobs, partial update and delete.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from jobly.core.exceptions import BadRequestException, NotFoundException
from jobly.repositories.base_repository import BaseRepository
from jobly.repositories.job_repository import shape_job_row
from jobly.utils.logger import get_logger, log_database_operation

logger = get_logger(__name__)

COMPANY_COLUMNS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)


class CompanyRepository(BaseRepository):
    """Repository for company database operations."""

    column_map = {
        "numEmployees": "num_employees",
        "logoUrl": "logo_url",
    }
    updatable_fields = frozenset({"name", "description", "numEmployees", "logoUrl"})

    @property
    def table_name(self) -> str:
        return "companies"

    @property
    def key_column(self) -> str:
        return "handle"

    @property
    def returning_columns(self) -> str:
        return COMPANY_COLUMNS

    def not_found(self, key: Any) -> NotFoundException:
        return NotFoundException(f"No company: {key}")

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a company.

        ``data`` holds ``handle, name, description, numEmployees, logoUrl``.

        Raises:
            BadRequestException: If the handle is already taken
        """
        handle = data["handle"]
        if await self.exists(handle):
            raise BadRequestException(f"Duplicate company: {handle}")

        try:
            row = await self.fetch_one(
                f"""INSERT INTO companies
                    (handle, name, description, num_employees, logo_url)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {COMPANY_COLUMNS}""",
                [
                    handle,
                    data["name"],
                    data["description"],
                    data.get("numEmployees"),
                    data.get("logoUrl"),
                ]
            )
        except IntegrityError as e:
            # Lost the race with a concurrent insert, or the name is taken
            logger.warning(f"Insert of company {handle} rejected by store: {e.orig}")
            raise BadRequestException(f"Duplicate company: {handle}")

        log_database_operation("create", self.table_name, handle)
        return row

    async def find_all(
        self,
        min_employees: Optional[int] = None,
        max_employees: Optional[int] = None,
        name: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        List companies ordered by name, optionally filtered.

        Args:
            min_employees: Keep companies with at least this many employees
            max_employees: Keep companies with at most this many employees
            name: Case-insensitive substring of the company name

        Raises:
            BadRequestException: If min_employees > max_employees
        """
        if (
            min_employees is not None
            and max_employees is not None
            and min_employees > max_employees
        ):
            raise BadRequestException("Min employees cannot be greater than max")

        where_clauses: List[str] = []
        values: List[Any] = []

        if min_employees is not None:
            values.append(min_employees)
            where_clauses.append(f"num_employees >= ${len(values)}")

        if max_employees is not None:
            values.append(max_employees)
            where_clauses.append(f"num_employees <= ${len(values)}")

        if name:
            values.append(f"%{name}%")
            where_clauses.append(f"LOWER(name) LIKE LOWER(${len(values)})")

        sql = f"SELECT {COMPANY_COLUMNS} FROM companies"
        if where_clauses:
            sql += " WHERE " + " AND ".join(where_clauses)
        sql += " ORDER BY name"

        return await self.query(sql, values)

    async def get(self, handle: str) -> Dict[str, Any]:
        """
        Get a company with its jobs (ordered by id).

        Raises:
            NotFoundException: If the company does not exist
        """
        company = await self.fetch_one(
            f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1",
            [handle]
        )
        if company is None:
            raise self.not_found(handle)

        jobs = await self.query(
            """SELECT id, title, salary, equity
               FROM jobs
               WHERE company_handle = $1
               ORDER BY id""",
            [handle]
        )
        company["jobs"] = [shape_job_row(job) for job in jobs]
        return company


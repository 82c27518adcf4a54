"""
Job Repository Implementation

Repository for job postings: creation against an existing company,
filtered listing, lookup with the owning company, partial update and delete.
"""

from typing import Any, Dict, List, Mapping, Optional
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from jobly.core.exceptions import BadRequestException, NotFoundException
from jobly.repositories.base_repository import BaseRepository
from jobly.utils.logger import get_logger, log_database_operation

logger = get_logger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'


def shape_job_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize ``equity`` to Decimal whatever the driver returned."""
    if "equity" in row and row["equity"] is not None:
        row["equity"] = Decimal(str(row["equity"]))
    return row


class JobRepository(BaseRepository):
    """Repository for job database operations."""

    # id and company_handle are fixed once a job exists
    updatable_fields = frozenset({"title", "salary", "equity"})

    @property
    def table_name(self) -> str:
        return "jobs"

    @property
    def key_column(self) -> str:
        return "id"

    @property
    def returning_columns(self) -> str:
        return JOB_COLUMNS

    def not_found(self, key: Any) -> NotFoundException:
        return NotFoundException(f"No job: {key}")

    def shape_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return shape_job_row(row)

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a job posting.

        ``data`` holds ``title, salary, equity, companyHandle``.

        Raises:
            NotFoundException: If the company does not exist
        """
        company_handle = data["companyHandle"]
        company = await self.fetch_one(
            "SELECT handle FROM companies WHERE handle = $1",
            [company_handle]
        )
        if company is None:
            raise NotFoundException(f"No company: {company_handle}")

        try:
            row = await self.fetch_one(
                f"""INSERT INTO jobs (title, salary, equity, company_handle)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {JOB_COLUMNS}""",
                [
                    data["title"],
                    data.get("salary"),
                    data.get("equity"),
                    company_handle,
                ]
            )
        except IntegrityError as e:
            logger.warning(f"Insert of job for {company_handle} rejected by store: {e.orig}")
            raise BadRequestException(f"Invalid job data for company: {company_handle}")

        log_database_operation("create", self.table_name, row["id"], company_handle=company_handle)
        return shape_job_row(row)

    async def find_all(
        self,
        title: Optional[str] = None,
        min_salary: Optional[int] = None,
        has_equity: Optional[bool] = None,
        company_handle: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        List jobs ordered by title, optionally filtered.

        Args:
            title: Case-insensitive substring of the job title
            min_salary: Keep jobs paying at least this much
            has_equity: When true, keep only jobs offering equity > 0
            company_handle: Keep jobs of this company only
        """
        where_clauses: List[str] = []
        values: List[Any] = []

        if title:
            values.append(f"%{title}%")
            where_clauses.append(f"LOWER(j.title) LIKE LOWER(${len(values)})")

        if min_salary is not None:
            values.append(min_salary)
            where_clauses.append(f"j.salary >= ${len(values)}")

        if has_equity:
            where_clauses.append("j.equity > 0")

        if company_handle:
            values.append(company_handle)
            where_clauses.append(f"j.company_handle = ${len(values)}")

        sql = """SELECT j.id,
                        j.title,
                        j.salary,
                        j.equity,
                        j.company_handle AS "companyHandle",
                        c.name AS "companyName"
                 FROM jobs j
                 LEFT JOIN companies AS c ON c.handle = j.company_handle"""
        if where_clauses:
            sql += " WHERE " + " AND ".join(where_clauses)
        sql += " ORDER BY j.title, j.id"

        rows = await self.query(sql, values)
        return [shape_job_row(row) for row in rows]

    async def get(self, job_id: int) -> Dict[str, Any]:
        """
        Get a job with its company nested under ``company``.

        Raises:
            NotFoundException: If the job does not exist
        """
        job = await self.fetch_one(
            f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1",
            [job_id]
        )
        if job is None:
            raise self.not_found(job_id)

        company = await self.fetch_one(
            """SELECT handle,
                      name,
                      description,
                      num_employees AS "numEmployees",
                      logo_url AS "logoUrl"
               FROM companies
               WHERE handle = $1""",
            [job.pop("companyHandle")]
        )
        job["company"] = company
        return shape_job_row(job)

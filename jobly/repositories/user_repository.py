"""
User Repository Implementation

Repository for users and their job applications: credential checks,
registration, profile updates and application tracking. Passwords are
stored as bcrypt hashes and never leave this module.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from jobly.core.database import DatabaseManager
from jobly.core.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from jobly.core.security import SecurityManager, security_manager
from jobly.models.user import ApplicationStatus
from jobly.repositories.base_repository import BaseRepository
from jobly.utils.logger import get_logger, log_database_operation, log_security_event

logger = get_logger(__name__)

USER_COLUMNS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)


class UserRepository(BaseRepository):
    """Repository for user database operations."""

    column_map = {
        "firstName": "first_name",
        "lastName": "last_name",
        "isAdmin": "is_admin",
    }
    updatable_fields = frozenset({"firstName", "lastName", "email", "password", "isAdmin"})

    def __init__(
        self,
        db_manager: DatabaseManager,
        security: Optional[SecurityManager] = None
    ):
        super().__init__(db_manager)
        self.security = security or security_manager

    @property
    def table_name(self) -> str:
        return "users"

    @property
    def key_column(self) -> str:
        return "username"

    @property
    def returning_columns(self) -> str:
        return USER_COLUMNS

    def not_found(self, key: Any) -> NotFoundException:
        return NotFoundException(f"No user found: {key}")

    def shape_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        row["isAdmin"] = bool(row["isAdmin"])
        return row

    async def authenticate(self, username: str, password: str) -> Dict[str, Any]:
        """
        Check a username/password pair.

        Unknown users and wrong passwords get the same error, so callers
        cannot probe which usernames exist.

        Returns:
            Dict[str, Any]: The user, without ``password``

        Raises:
            UnauthorizedException: If the credentials do not match
        """
        user = await self.fetch_one(
            f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
            [username]
        )

        if user is not None:
            hashed = user.pop("password")
            if self.security.verify_password(password, hashed):
                log_security_event("authenticate", username=username)
                return self.shape_row(user)

        log_security_event("authenticate", username=username, success=False)
        raise UnauthorizedException("Invalid username/password")

    async def register(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Register a user with a freshly hashed password.

        ``data`` holds ``username, password, firstName, lastName, email`` and
        optionally ``isAdmin`` (false when absent).

        Raises:
            BadRequestException: If the username is already taken
        """
        username = data["username"]
        if await self.exists(username):
            raise BadRequestException(f"Duplicate username: {username}")

        hashed_password = self.security.hash_password(data["password"])

        try:
            user = await self.fetch_one(
                f"""INSERT INTO users
                    (username, password, first_name, last_name, email, is_admin)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING {USER_COLUMNS}""",
                [
                    username,
                    hashed_password,
                    data["firstName"],
                    data["lastName"],
                    data["email"],
                    bool(data.get("isAdmin", False)),
                ]
            )
        except IntegrityError as e:
            logger.warning(f"Insert of user {username} rejected by store: {e.orig}")
            raise BadRequestException(f"Duplicate username: {username}")

        log_database_operation("create", self.table_name, username)
        return self.shape_row(user)

    async def find_all(self) -> List[Dict[str, Any]]:
        """List all users ordered by username."""
        rows = await self.query(f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
        return [self.shape_row(row) for row in rows]

    async def get(self, username: str) -> Dict[str, Any]:
        """
        Get a user with the jobs they applied to.

        Each application carries the job id, title, company handle and name,
        and the application status, ordered by job id.

        Raises:
            NotFoundException: If the user does not exist
        """
        user = await self.fetch_one(
            f"SELECT {USER_COLUMNS} FROM users WHERE username = $1",
            [username]
        )
        if user is None:
            raise self.not_found(username)

        user["applications"] = await self.query(
            """SELECT a.job_id AS id,
                      j.title,
                      j.company_handle AS "companyHandle",
                      c.name AS "companyName",
                      a.status
               FROM applications AS a
               JOIN jobs AS j ON j.id = a.job_id
               JOIN companies AS c ON c.handle = j.company_handle
               WHERE a.username = $1
               ORDER BY a.job_id""",
            [username]
        )
        return self.shape_row(user)

    async def update(self, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partially update a user; a new password is hashed before storing.

        Changing ``isAdmin`` is not checked here. Callers acting for another
        user must run SecurityManager.ensure_can_change_admin first.

        Raises:
            BadRequestException: If ``data`` is empty or has unknown fields
            NotFoundException: If the user does not exist
        """
        data = dict(data)
        if "password" in data:
            data["password"] = self.security.hash_password(data["password"])

        return await super().update(username, data)

    async def apply_to_job(
        self,
        username: str,
        job_id: int,
        status: str = ApplicationStatus.APPLIED.value
    ) -> Dict[str, Any]:
        """
        Record that ``username`` applied to ``job_id``.

        Raises:
            BadRequestException: Unknown status, or the user already applied
            NotFoundException: If the job or the user does not exist
        """
        try:
            status = ApplicationStatus(status).value
        except ValueError:
            raise BadRequestException(f"Invalid application status: {status}")

        job = await self.fetch_one("SELECT id FROM jobs WHERE id = $1", [job_id])
        if job is None:
            raise NotFoundException(f"No job: {job_id}")

        if not await self.exists(username):
            raise NotFoundException(f"No username: {username}")

        existing = await self.fetch_one(
            "SELECT job_id FROM applications WHERE username = $1 AND job_id = $2",
            [username, job_id]
        )
        if existing is not None:
            raise BadRequestException(f"Already applied to job: {job_id}")

        try:
            application = await self.fetch_one(
                """INSERT INTO applications (username, job_id, status)
                   VALUES ($1, $2, $3)
                   RETURNING username, job_id AS "jobId", status""",
                [username, job_id, status]
            )
        except IntegrityError as e:
            logger.warning(f"Application {username}/{job_id} rejected by store: {e.orig}")
            raise BadRequestException(f"Already applied to job: {job_id}")

        log_database_operation("create", "applications", job_id, username=username, status=status)
        return application

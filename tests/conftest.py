"""
Test Configuration for Jobly

Each test gets a fresh in-memory SQLite database seeded with three
companies, four jobs, two users and one application.
"""

import os

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Must be set before jobly reads its settings
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("TEST_DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import List

import pytest

from jobly.core.database import DatabaseManager
from jobly.core.security import security_manager
from jobly.repositories import CompanyRepository, JobRepository, UserRepository


@pytest.fixture
async def db_manager():
    """Empty schema in a private in-memory database."""
    manager = DatabaseManager(TEST_DATABASE_URL)
    await manager.init_database()
    await manager.create_tables()
    yield manager
    await manager.close_connections()


@pytest.fixture
async def test_job_ids(db_manager) -> List[int]:
    """Seed the database and return the ids of jobs J1..J4."""
    await db_manager.query(
        """INSERT INTO companies (handle, name, num_employees, description, logo_url)
           VALUES ('c1', 'C1', 1, 'Desc1', 'http://c1.img'),
                  ('c2', 'C2', 2, 'Desc2', 'http://c2.img'),
                  ('c3', 'C3', 3, 'Desc3', 'http://c3.img')"""
    )

    job_ids = []
    for title, salary, equity, handle in [
        ("J1", 100, 0.1, "c1"),
        ("J2", 200, 0.2, "c1"),
        ("J3", 300, 0.0, "c1"),
        ("J4", None, None, "c2"),
    ]:
        rows = await db_manager.query(
            """INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)
               RETURNING id""",
            [title, salary, equity, handle]
        )
        job_ids.append(rows[0]["id"])

    for username in ("u1", "u2"):
        await db_manager.query(
            """INSERT INTO users (username, password, first_name, last_name, email, is_admin)
               VALUES ($1, $2, $3, $4, $5, $6)""",
            [
                username,
                security_manager.hash_password(f"password{username[1:]}"),
                f"{username.upper()}F",
                f"{username.upper()}L",
                f"{username}@email.com",
                False,
            ]
        )

    await db_manager.query(
        "INSERT INTO applications (username, job_id, status) VALUES ($1, $2, $3)",
        ["u1", job_ids[0], "applied"]
    )

    return job_ids


@pytest.fixture
def company_repository(db_manager, test_job_ids) -> CompanyRepository:
    return CompanyRepository(db_manager)


@pytest.fixture
def job_repository(db_manager, test_job_ids) -> JobRepository:
    return JobRepository(db_manager)


@pytest.fixture
def user_repository(db_manager, test_job_ids) -> UserRepository:
    return UserRepository(db_manager)

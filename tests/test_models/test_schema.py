"""
Tests for the Jobly schema.

Checks the constraints and relationships declared on the models.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload

from jobly.models import Application, ApplicationStatus, Company, Job, User


@pytest.fixture
def session_factory(db_manager):
    return async_sessionmaker(db_manager.engine, expire_on_commit=False)


@pytest.mark.database
@pytest.mark.unit
class TestSchema:
    """Test model constraints."""

    async def test_company_jobs_relationship(self, session_factory, test_job_ids):
        async with session_factory() as session:
            result = await session.execute(
                select(Company).options(selectinload(Company.jobs)).where(Company.handle == "c1")
            )
            company = result.scalar_one()

        assert sorted(job.title for job in company.jobs) == ["J1", "J2", "J3"]
        assert all(job.company_handle == "c1" for job in company.jobs)

    async def test_application_defaults_to_applied(self, session_factory, test_job_ids):
        async with session_factory() as session:
            session.add(Application(username="u2", job_id=test_job_ids[0]))
            await session.commit()

            application = await session.get(Application, ("u2", test_job_ids[0]))

        assert application.status == ApplicationStatus.APPLIED.value

    async def test_job_requires_existing_company(self, session_factory):
        async with session_factory() as session:
            session.add(Job(title="Orphan", company_handle="nope"))

            with pytest.raises(IntegrityError):
                await session.commit()

    async def test_negative_salary_rejected(self, session_factory, test_job_ids):
        async with session_factory() as session:
            session.add(Job(title="Bad", salary=-1, company_handle="c1"))

            with pytest.raises(IntegrityError):
                await session.commit()

    async def test_unknown_application_status_rejected(self, session_factory, test_job_ids):
        async with session_factory() as session:
            session.add(Application(username="u2", job_id=test_job_ids[1], status="hired"))

            with pytest.raises(IntegrityError):
                await session.commit()

    async def test_user_is_not_admin_by_default(self, session_factory):
        async with session_factory() as session:
            session.add(
                User(
                    username="new",
                    password="hash",
                    first_name="New",
                    last_name="User",
                    email="new@email.com",
                )
            )
            await session.commit()

            user = await session.get(User, "new")

        assert user.is_admin is False

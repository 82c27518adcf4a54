"""
Tests for CompanyRepository.
"""

from decimal import Decimal

import pytest

from jobly.core.exceptions import BadRequestException, NotFoundException


NEW_COMPANY = {
    "handle": "new",
    "name": "New",
    "description": "New Description",
    "numEmployees": 1,
    "logoUrl": "http://new.img",
}


@pytest.mark.database
class TestCompanyCreate:
    """Test company creation."""

    async def test_create(self, company_repository):
        company = await company_repository.create(NEW_COMPANY)

        assert company == NEW_COMPANY
        assert await company_repository.get("new") == {**NEW_COMPANY, "jobs": []}

    async def test_create_without_optional_fields(self, company_repository):
        company = await company_repository.create(
            {"handle": "bare", "name": "Bare", "description": "No extras"}
        )

        assert company["numEmployees"] is None
        assert company["logoUrl"] is None

    async def test_duplicate_handle(self, company_repository):
        await company_repository.create(NEW_COMPANY)

        with pytest.raises(BadRequestException, match="Duplicate company: new"):
            await company_repository.create(NEW_COMPANY)

    async def test_duplicate_name_is_rejected_by_store(self, company_repository):
        with pytest.raises(BadRequestException, match="Duplicate company: other"):
            await company_repository.create({**NEW_COMPANY, "handle": "other", "name": "C1"})


@pytest.mark.database
class TestCompanyFindAll:
    """Test company listing and filters."""

    async def test_no_filter(self, company_repository):
        companies = await company_repository.find_all()

        assert companies == [
            {
                "handle": "c1",
                "name": "C1",
                "description": "Desc1",
                "numEmployees": 1,
                "logoUrl": "http://c1.img",
            },
            {
                "handle": "c2",
                "name": "C2",
                "description": "Desc2",
                "numEmployees": 2,
                "logoUrl": "http://c2.img",
            },
            {
                "handle": "c3",
                "name": "C3",
                "description": "Desc3",
                "numEmployees": 3,
                "logoUrl": "http://c3.img",
            },
        ]

    async def test_min_employees(self, company_repository):
        companies = await company_repository.find_all(min_employees=2)

        assert [c["handle"] for c in companies] == ["c2", "c3"]

    async def test_max_employees(self, company_repository):
        companies = await company_repository.find_all(max_employees=2)

        assert [c["handle"] for c in companies] == ["c1", "c2"]

    async def test_employee_range(self, company_repository):
        companies = await company_repository.find_all(min_employees=2, max_employees=2)

        assert [c["handle"] for c in companies] == ["c2"]

    async def test_name_is_case_insensitive_substring(self, company_repository):
        assert [c["handle"] for c in await company_repository.find_all(name="1")] == ["c1"]
        assert len(await company_repository.find_all(name="c")) == 3

    async def test_no_match(self, company_repository):
        assert await company_repository.find_all(name="nope") == []

    async def test_min_greater_than_max(self, company_repository):
        with pytest.raises(BadRequestException, match="Min employees cannot be greater than max"):
            await company_repository.find_all(min_employees=3, max_employees=1)

    async def test_min_greater_than_max_with_name(self, company_repository):
        with pytest.raises(BadRequestException, match="Min employees cannot be greater than max"):
            await company_repository.find_all(min_employees=3, max_employees=1, name="c")


@pytest.mark.database
class TestCompanyGet:
    """Test company lookup."""

    async def test_get_includes_jobs_ordered_by_id(self, company_repository, test_job_ids):
        company = await company_repository.get("c1")

        assert company["name"] == "C1"
        assert company["jobs"] == [
            {"id": test_job_ids[0], "title": "J1", "salary": 100, "equity": Decimal("0.1")},
            {"id": test_job_ids[1], "title": "J2", "salary": 200, "equity": Decimal("0.2")},
            {"id": test_job_ids[2], "title": "J3", "salary": 300, "equity": Decimal("0")},
        ]

    async def test_get_company_without_jobs(self, company_repository):
        company = await company_repository.get("c3")

        assert company["jobs"] == []

    async def test_not_found(self, company_repository):
        with pytest.raises(NotFoundException, match="No company: nope"):
            await company_repository.get("nope")


@pytest.mark.database
class TestCompanyUpdate:
    """Test partial company updates."""

    async def test_update_all_fields(self, company_repository):
        data = {
            "name": "New",
            "description": "New Description",
            "numEmployees": 10,
            "logoUrl": "http://new.img",
        }

        company = await company_repository.update("c1", data)

        assert company == {"handle": "c1", **data}

    async def test_update_leaves_other_fields(self, company_repository):
        company = await company_repository.update("c2", {"description": "Changed"})

        assert company["description"] == "Changed"
        assert company["name"] == "C2"
        assert company["numEmployees"] == 2

    async def test_update_to_null(self, company_repository):
        company = await company_repository.update(
            "c1", {"numEmployees": None, "logoUrl": None}
        )

        assert company["numEmployees"] is None
        assert company["logoUrl"] is None

    async def test_not_found(self, company_repository):
        with pytest.raises(NotFoundException, match="No company: nope"):
            await company_repository.update("nope", {"name": "Nope"})

    async def test_no_data(self, company_repository):
        with pytest.raises(BadRequestException, match="No data"):
            await company_repository.update("c1", {})

    async def test_handle_is_not_updatable(self, company_repository):
        with pytest.raises(BadRequestException):
            await company_repository.update("c1", {"handle": "c9"})

        assert await company_repository.exists("c1")

    async def test_conflicting_name(self, company_repository):
        with pytest.raises(BadRequestException):
            await company_repository.update("c1", {"name": "C2"})


@pytest.mark.database
class TestCompanyRemove:
    """Test company deletion."""

    async def test_remove(self, company_repository):
        await company_repository.remove("c3")

        with pytest.raises(NotFoundException):
            await company_repository.get("c3")

    async def test_not_found(self, company_repository):
        with pytest.raises(NotFoundException, match="No company: nope"):
            await company_repository.remove("nope")

    async def test_company_with_jobs_is_kept(self, company_repository):
        with pytest.raises(BadRequestException):
            await company_repository.remove("c1")

        assert await company_repository.exists("c1")

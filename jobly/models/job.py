"""
Job Database Model

SQLAlchemy 2.0 model for job postings.
"""

from typing import Optional, TYPE_CHECKING
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobly.core.database import Base

if TYPE_CHECKING:
    from jobly.models.company import Company


class Job(Base):
    """
    Job posting model.

    Deleting a company that still has jobs is rejected by the foreign key;
    nothing cascades.
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    salary: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    equity: Mapped[Optional[Decimal]] = mapped_column(Numeric, nullable=True)
    company_handle: Mapped[str] = mapped_column(
        String(25),
        ForeignKey("companies.handle"),
        nullable=False
    )

    company: Mapped["Company"] = relationship(back_populates="jobs")

    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_job_salary_positive"),
        CheckConstraint("equity >= 0 AND equity <= 1.0", name="ck_job_equity_range"),
        Index("idx_job_company_handle", "company_handle"),
        Index("idx_job_title", "title"),
    )

    def __repr__(self) -> str:
        """String representation of Job."""
        return f"<Job(id={self.id}, title='{self.title}', company='{self.company_handle}')>"

"""
Company Database Model

SQLAlchemy model for companies posting jobs on Jobly.
"""

from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobly.core.database import Base

if TYPE_CHECKING:
    from jobly.models.job import Job


class Company(Base):
    """
    Company model.

    Keyed by ``handle``, the human-readable identifier used in URLs.
    """

    __tablename__ = "companies"

    handle: Mapped[str] = mapped_column(String(25), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    num_employees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    jobs: Mapped[List["Job"]] = relationship(back_populates="company")

    __table_args__ = (
        CheckConstraint("num_employees >= 0", name="ck_company_num_employees_positive"),
    )

    def __repr__(self) -> str:
        """String representation of Company."""
        return f"<Company(handle='{self.handle}', name='{self.name}')>"

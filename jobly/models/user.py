"""
User and Application Database Models
"""

from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobly.core.database import Base


class ApplicationStatus(str, Enum):
    """Where an application stands."""
    APPLIED = "applied"
    INTERVIEWED = "interviewed"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class User(Base):
    """User model. ``password`` only ever holds a bcrypt hash."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(25), primary_key=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"


class Application(Base):
    """A user's application to a job, one per (username, job_id)."""

    __tablename__ = "applications"

    username: Mapped[str] = mapped_column(
        String(25),
        ForeignKey("users.username"),
        primary_key=True
    )
    job_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("jobs.id"),
        primary_key=True
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApplicationStatus.APPLIED.value,
        server_default=ApplicationStatus.APPLIED.value
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('applied', 'interviewed', 'rejected', 'accepted')",
            name="ck_application_status_valid"
        ),
    )

    def __repr__(self) -> str:
        return f"<Application(username='{self.username}', job_id={self.job_id}, status='{self.status}')>"

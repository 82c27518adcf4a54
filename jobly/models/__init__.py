"""
Database Models Package

SQLAlchemy table definitions for companies, jobs, users and applications.
"""

from jobly.core.database import Base
from jobly.models.company import Company
from jobly.models.job import Job
from jobly.models.user import Application, ApplicationStatus, User

__all__ = [
    "Base",
    "Company",
    "Job",
    "User",
    "Application",
    "ApplicationStatus",
]

"""
Repository Layer

Data access layer using the repository pattern for clean separation
of database operations from the HTTP layer.
"""

from .base_repository import BaseRepository
from .job_repository import JobRepository
from .company_repository import CompanyRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "JobRepository",
    "CompanyRepository",
    "UserRepository",
]

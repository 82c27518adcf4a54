"""
Jobly

Job-board backend core: company, job and user repositories over a
relational store, plus an API client for frontends.
"""

__version__ = "1.0.0"

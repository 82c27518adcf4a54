"""
Test Suite

Unit tests for the SQL helpers, security and error handling, repository
tests against an in-memory database, and API client tests.
"""

"""Unit tests for the database layer.

Repository and query helper tests run against in-memory SQLite; the
session-handling tests of the generic repository use mocks.
"""

"""
Centralized mock objects for testing.

This package provides reusable mock factories and fakes for document
stores, cache stores and Redis, reducing code duplication across test files.
"""

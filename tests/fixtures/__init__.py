"""
Test fixtures package.

This package provides reusable pytest fixtures for testing the notification
channel registry. Import fixtures into conftest.py to make them available to
all tests.

Available fixture modules:
- stores: In-memory and SQLite-backed channel stores
"""

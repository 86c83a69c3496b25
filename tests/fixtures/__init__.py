"""Test fixtures for db-drive."""

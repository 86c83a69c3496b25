"""Command line commands for db-drive."""

"""Command-line interface for vfsadmin."""

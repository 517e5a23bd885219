"""Standard library of store adapters shipped with vfsadmin."""

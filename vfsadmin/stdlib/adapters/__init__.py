"""Node and content store adapters."""

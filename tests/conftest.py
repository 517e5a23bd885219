"""Configuration file for pytest containing fixtures and configuration.

This module provides fixtures that can be used across multiple test files:
- quiet_logging: keeps service logs out of test output unless they are warnings
"""

import pytest

from vfsadmin.kernel.logging import configure_logging


@pytest.fixture(scope="session", autouse=True)
def quiet_logging() -> None:
    """Configure plain WARNING-level logging once for the whole run."""
    configure_logging(level="WARNING", format="console", force_reconfigure=True)

"""Global pytest configuration and fixtures.

This module provides shared fixtures and configuration for all tests.
"""

import logging
import random
import sys
from pathlib import Path

import pytest


# =============================================================================
# Path Setup
# =============================================================================

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (CLI end to end)"
    )
    config.addinivalue_line(
        "markers", "differential: Property-based tests over whole sessions"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests (>30 seconds)"
    )


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random generator."""
    return random.Random(1234)


@pytest.fixture
def small_harness():
    """Harness config with short seed content so sessions stay fast."""
    from listcheck.config import HarnessConfig
    return HarnessConfig(min_seed_length=20, max_seed_length=200, max_array_length=300)


@pytest.fixture(autouse=True)
def _reset_listcheck_logging():
    """Drop handlers installed by configure_logging between tests."""
    yield
    logger = logging.getLogger("listcheck")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

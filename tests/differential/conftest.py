"""
Shared fixtures and Hypothesis configuration for differential tests.

Configuration:
- 50 examples per property by default (whole sessions are expensive)
- Reproducible seeds for CI
"""

import pytest
from hypothesis import settings, Verbosity, Phase

from listcheck.config import HarnessConfig

# Register Hypothesis profiles
settings.register_profile(
    "ci",
    max_examples=50,
    deadline=None,  # Sessions have no meaningful per-example deadline
    print_blob=True,  # Print reproduction info on failure
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)

settings.register_profile(
    "thorough",
    max_examples=500,
    deadline=None,
    print_blob=True,
)

settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    print_blob=True,
)

settings.register_profile(
    "debug",
    max_examples=3,
    verbosity=Verbosity.verbose,
    deadline=None,
)

# Load CI profile by default
settings.load_profile("ci")


@pytest.fixture(scope="session")
def session_harness() -> HarnessConfig:
    """Seed content short enough to keep each session in the millisecond range."""
    return HarnessConfig(min_seed_length=2, max_seed_length=60, max_array_length=80)

"""
Shared fixtures for ANOVA tests.
"""

import numpy as np
import pytest


@pytest.fixture
def two_groups():
    """2 groups with unequal sizes and spreads."""
    rng = np.random.default_rng(42)
    return [rng.normal(10.0, 1.0, 12), rng.normal(11.5, 3.0, 20)]


@pytest.fixture
def equal_means_groups():
    """3 groups drawn from the same distribution."""
    rng = np.random.default_rng(2024)
    return [rng.normal(5.0, 2.0, 30) for _ in range(3)]


@pytest.fixture
def small_groups():
    """Hand-sized groups for exact checks."""
    return [
        [4.2, 5.1, 3.9, 4.8, 5.0],
        [6.1, 7.3, 6.8, 5.9],
        [5.5, 4.9, 6.2, 5.8, 6.0, 5.1],
    ]

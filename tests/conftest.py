"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def separated_groups():
    """3 groups (n=10 each) with clearly different means 10, 15, 20."""
    rng = np.random.default_rng(42)
    return [
        rng.normal(10.0, 1.0, 10),
        rng.normal(15.0, 1.0, 10),
        rng.normal(20.0, 1.0, 10),
    ]


@pytest.fixture
def unbalanced_groups():
    """4 unbalanced groups (n=6, 9, 12, 8) with moderately spaced means."""
    rng = np.random.default_rng(123)
    return [
        rng.normal(10.0, 2.0, 6),
        rng.normal(11.0, 2.0, 9),
        rng.normal(14.0, 2.0, 12),
        rng.normal(14.5, 2.0, 8),
    ]


@pytest.fixture
def heteroscedastic_groups():
    """3 groups with equal means but very different spreads."""
    rng = np.random.default_rng(7)
    return [
        rng.normal(0.0, 1.0, 40),
        rng.normal(0.0, 15.0, 40),
        rng.normal(0.0, 1.0, 40),
    ]


@pytest.fixture
def association_table():
    """3x3 table with a clear row/column association."""
    return np.array([
        [5, 10, 2],
        [3, 15, 7],
        [12, 4, 10],
    ])


@pytest.fixture
def outcome_table():
    """4 groups (rows) x 3 outcomes; rows 1 and 2 alike, row 4 very different."""
    return np.array([
        [50, 30, 20],
        [48, 32, 20],
        [20, 40, 40],
        [10, 10, 80],
    ])

"""pytest configuration and shared fixtures."""

from __future__ import annotations

import os
import sys

import numpy as np
import pytest

# Ensure tests/ dir is on path so test_apriori_base imports work
sys.path.insert(0, os.path.dirname(__file__))

STRUCTURES = ["array", "tidlist"]


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "oracle: results compared against brute-force enumeration",
    )


@pytest.fixture(params=STRUCTURES)
def structure(request: pytest.FixtureRequest) -> str:
    """Run a test once per search strategy."""
    return request.param


@pytest.fixture
def scenario_bits() -> list[str]:
    """Four transactions over three items; item 0 occurs everywhere."""
    return ["110", "110", "101", "111"]


@pytest.fixture
def grocery_bits() -> np.ndarray:
    return np.array(
        [
            [0, 0, 0, 1, 0, 1, 1, 1, 1, 0, 1],
            [0, 0, 1, 1, 0, 1, 0, 1, 1, 0, 1],
            [1, 0, 0, 1, 0, 1, 1, 0, 0, 0, 0],
            [0, 1, 0, 0, 0, 1, 1, 0, 0, 1, 1],
            [0, 1, 0, 1, 1, 1, 0, 0, 1, 0, 0],
        ]
    )

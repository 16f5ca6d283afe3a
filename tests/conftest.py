"""Shared pytest configuration and fixtures for droneshow tests.

This module provides:
- Custom markers for test categorization
- Shared fixtures for formations and drone ids
"""

import logging
from pathlib import Path

import numpy as np
import pytest

from droneshow.core import GeoPoint
from droneshow.coordination import FormationGenerator

logger = logging.getLogger(__name__)

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure Python tests, no threads or timers")
    config.addinivalue_line("markers", "threaded: Tests that start background threads")
    config.addinivalue_line("markers", "slow: Tests that take a long time")


@pytest.fixture
def center() -> GeoPoint:
    """Show center above central Tokyo."""
    return GeoPoint(latitude=35.6762, longitude=139.6503, altitude=80.0)


@pytest.fixture
def drone_ids() -> list:
    """Twelve drone ids, as the mock telemetry feed produces."""
    return [f"drone-{i}" for i in range(1, 13)]


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random source."""
    return np.random.default_rng(1234)


@pytest.fixture
def show_formations(center, drone_ids) -> list:
    """Star, triangle and circle with the same twelve drones.

    Star (5 points) uses 10 slots, the triangle 12 and the circle 12.
    """
    return [
        FormationGenerator.create_star_formation(center, 40.0, drone_ids, points=5),
        FormationGenerator.create_triangle_formation(center, 60.0, drone_ids),
        FormationGenerator.create_circle_formation(center, 35.0, drone_ids),
    ]


def pytest_collection_modifyitems(config, items):
    """Auto-add markers based on test location."""
    for item in items:
        # Auto-mark tests in tests/unit/ with @pytest.mark.unit
        if "tests/unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Auto-mark tests in tests/threaded/ with @pytest.mark.threaded
        if "tests/threaded" in str(item.fspath):
            item.add_marker(pytest.mark.threaded)

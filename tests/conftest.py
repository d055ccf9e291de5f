"""Pytest configuration for pathtracer tests.

Shared fixtures: a seeded random source so every test that samples is
reproducible, and a couple of small materials and scenes.
"""

import random

import numpy as np
import pytest

from pathtracer.core.vector import Vector3
from pathtracer.materials.lambertian import Lambertian


@pytest.fixture
def rng():
    """Seeded random source for sampling."""
    return random.Random(1234)


@pytest.fixture
def np_rng():
    """Seeded numpy generator for procedural textures."""
    return np.random.default_rng(1234)


@pytest.fixture
def white():
    """Plain white diffuse material."""
    return Lambertian(Vector3(1.0, 1.0, 1.0))

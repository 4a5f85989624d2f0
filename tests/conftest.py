"""
Pytest configuration and shared fixtures for Lightcone tests.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests"""
    return np.random.default_rng(42)


@pytest.fixture
def at_rest():
    """Agent at rest at the spatial origin, t = 0"""
    from lightcone.mechanics import spawn
    return spawn(0.0, 0.0)


@pytest.fixture
def stationary_emitter():
    """
    World line of an emitter at rest at x = 10, sampled every 0.5 from
    t = 0 to t = 30 (61 samples)
    """
    from lightcone.vector import Vector3, Vector4
    from lightcone.mechanics import PhaseSpace
    from lightcone.worldline import WorldLine

    wl = WorldLine()
    for k in range(61):
        wl.append(PhaseSpace(Vector4(0.5 * k, 10.0, 0.0, 0.0), Vector3.zero()))
    return wl


@pytest.fixture
def small_config():
    """Small simulation configuration"""
    from lightcone.config import create_small_test_config
    return create_small_test_config()


@pytest.fixture
def arena(small_config):
    """Two agents at rest, 4 units apart"""
    from lightcone.simulation import Arena
    small_config.spawn_radius = 2.0
    arena = Arena(small_config)
    arena.populate()
    return arena


@pytest.fixture
def random_proper_velocities(rng):
    """A batch of sub-relativistic to ultra-relativistic proper velocities"""
    from lightcone.vector import Vector3
    return [Vector3.from_array(rng.normal(0.0, scale, size=3))
            for scale in (0.01, 0.3, 1.0, 5.0) for _ in range(5)]

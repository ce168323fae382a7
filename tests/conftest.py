"""Pytest fixtures for Sketchify tests."""

import tempfile

import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Default rough rendering configuration."""
    from sketchify.config import RoughConfig
    return RoughConfig()


@pytest.fixture
def sketch_config():
    """Default full sketch configuration."""
    from sketchify.config import SketchConfig
    return SketchConfig()


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def recorder():
    """Sink that records every drawing call."""
    from sketchify.render.sinks import OpsRecorder
    return OpsRecorder()


@pytest.fixture
def square():
    """10x10 square with a corner at the origin."""
    return [(0, 0), (10, 0), (10, 10), (0, 10)]


@pytest.fixture
def u_polygon():
    """Concave U shape: two 20-wide arms joined by a 20-high base."""
    return [
        (0, 0), (60, 0), (60, 60), (40, 60),
        (40, 20), (20, 20), (20, 60), (0, 60),
    ]


class CountingRng:
    """Wraps a numpy generator and counts random() draws."""

    def __init__(self, seed=0):
        self._rng = np.random.default_rng(seed)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self._rng.random()


@pytest.fixture
def counting_rng():
    """Random generator that counts its draws."""
    return CountingRng(seed=1)


class ScriptedRng:
    """Returns 0.01, 0.02, 0.03, ... so each draw is identifiable."""

    def __init__(self):
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.calls / 100


@pytest.fixture
def scripted_rng():
    """Random generator with a known increasing sequence."""
    return ScriptedRng()

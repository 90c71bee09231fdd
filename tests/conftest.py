"""Shared fixtures for the face authentication test suite."""
import numpy as np
import pytest

from faceauth.infrastructure.storage import InMemoryIdentityStore
from faceauth.services.authentication import AuthenticationService
from faceauth.services.score_simulation import RandomScoreSimulator

DIMENSION = 128


@pytest.fixture
def rng():
    """Deterministic generator for building descriptors."""
    return np.random.default_rng(1234)


@pytest.fixture
def make_descriptor(rng):
    """Build random descriptors in the value range face-api.js produces."""
    def _make(dimension: int = DIMENSION) -> list:
        return rng.uniform(-0.25, 0.25, size=dimension).tolist()
    return _make


@pytest.fixture
def simulator():
    """Seeded score simulator."""
    return RandomScoreSimulator(seed=42)


@pytest.fixture
def store():
    """Empty in-memory identity store."""
    return InMemoryIdentityStore()


@pytest.fixture
def authentication(store):
    """Authentication service with the reference 0.6 threshold."""
    return AuthenticationService(store, threshold=0.6)

"""Service interfaces package."""
from .scoring import ScoreSimulator
from .storage import IdentityStore

__all__ = ["IdentityStore", "ScoreSimulator"]

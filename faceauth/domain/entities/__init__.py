"""Domain entities package."""
from .identity import DisplayInfo, FaceSample, Identity, MatchCandidate

__all__ = ["DisplayInfo", "FaceSample", "Identity", "MatchCandidate"]

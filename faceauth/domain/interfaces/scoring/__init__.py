from .score_simulator import ScoreSimulator

__all__ = ["ScoreSimulator"]

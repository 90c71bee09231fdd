"""Value objects package."""
from .recognition import (
    AuthenticationOutcome,
    EnrollmentStatistics,
    EvaluationMetrics,
    GroupAuthResult,
    GroupMemberResult,
    MatchEntry,
    MatchResult,
    SimilarityReport,
    SubModelScores,
)

__all__ = [
    "AuthenticationOutcome",
    "EnrollmentStatistics",
    "EvaluationMetrics",
    "GroupAuthResult",
    "GroupMemberResult",
    "MatchEntry",
    "MatchResult",
    "SimilarityReport",
    "SubModelScores",
]

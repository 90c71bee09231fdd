"""Face comparison and matching value objects."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SubModelScores(BaseModel):
    """Per-model similarity scores.

    These are SIMULATED stand-ins for third-party face recognition models that
    are not available to this service. They are derived from cosine similarity
    plus random jitter and are not real model inferences.
    """
    face_net: float = Field(..., description="Simulated FaceNet score", ge=0.0, le=1.0)
    vgg_face: float = Field(..., description="Simulated VGG-Face score", ge=0.0, le=1.0)
    arc_face: float = Field(..., description="Simulated ArcFace score", ge=0.0, le=1.0)
    simulated: bool = Field(True, description="Scores are simulated, not model outputs")


class SimilarityReport(BaseModel):
    """Result of comparing two descriptors."""
    euclidean_distance: float = Field(..., description="Euclidean distance", ge=0.0)
    manhattan_distance: float = Field(..., description="Manhattan distance", ge=0.0)
    cosine_similarity: float = Field(..., description="Cosine similarity (-1 to 1)")
    overall_similarity: float = Field(..., description="exp(-euclidean), in (0, 1]", ge=0.0, le=1.0)
    sub_model_scores: SubModelScores = Field(..., description="Simulated per-model scores")


class AuthenticationOutcome(BaseModel):
    """Result of checking one probe against one stored descriptor."""
    authenticated: bool = Field(..., description="Whether distance is below the threshold")
    distance: float = Field(..., description="Euclidean distance between stored and probe")
    similarity: float = Field(..., description="exp(-distance)")
    threshold: float = Field(..., description="Distance threshold applied")


class GroupMemberResult(BaseModel):
    """Authentication outcome of a single group member."""
    identity: str = Field(..., description="Identity reference as supplied by the caller")
    authenticated: bool = Field(..., description="Whether this member authenticated")
    distance: Optional[float] = Field(None, description="Euclidean distance, when compared")
    similarity: Optional[float] = Field(None, description="exp(-distance), when compared")
    handle: Optional[str] = Field(None, description="Username of the resolved identity")
    display_name: Optional[str] = Field(None, description="Display name of the resolved identity")
    error: Optional[str] = Field(None, description="Reason the member could not be compared")


class GroupAuthResult(BaseModel):
    """Aggregate outcome of group (quorum) authentication."""
    group_authenticated: bool = Field(..., description="authenticated_count >= required_count")
    authenticated_count: int = Field(..., description="Members that authenticated", ge=0)
    required_count: int = Field(..., description="Quorum size", ge=1)
    total_members: int = Field(..., description="Members evaluated", ge=1)
    members: List[GroupMemberResult] = Field(..., description="Per-member results in input order")
    timestamp: datetime = Field(..., description="When the evaluation finished (UTC)")


class MatchEntry(BaseModel):
    """A ranked population match."""
    identity_id: str = Field(..., description="Matched identity")
    handle: str = Field(..., description="Username of the matched identity")
    display_name: str = Field(..., description="Display name of the matched identity")
    similarity: float = Field(..., description="exp(-euclidean)", ge=0.0, le=1.0)


class EvaluationMetrics(BaseModel):
    """Summary figures reported with a population match.

    tpr, fpr and accuracy are SIMULATED placeholder constants gated on the
    number of matches above threshold. They are not measured against ground
    truth.
    """
    total_faces: int = Field(..., description="Population size", ge=0)
    matched_above_threshold: int = Field(..., description="Matches with similarity >= threshold", ge=0)
    processing_time_seconds: float = Field(..., description="Measured matching time", ge=0.0)
    tpr: float = Field(..., description="Simulated true positive rate")
    fpr: float = Field(..., description="Simulated false positive rate")
    accuracy: float = Field(..., description="Simulated accuracy")
    simulated: bool = Field(True, description="tpr/fpr/accuracy are placeholders")


class MatchResult(BaseModel):
    """Ranked population match with evaluation metrics."""
    matches: List[MatchEntry] = Field(..., description="All matches, similarity descending")
    threshold: float = Field(..., description="Similarity threshold applied")
    metrics: EvaluationMetrics = Field(..., description="Evaluation metrics snapshot")


class EnrollmentStatistics(BaseModel):
    """Enrollment counts across all identities."""
    total_identities: int = Field(..., ge=0)
    with_face_auth: int = Field(..., ge=0)
    without_face_auth: int = Field(..., ge=0)
    percent_with_face_auth: float = Field(..., ge=0.0, le=100.0)
    total_face_samples: int = Field(..., ge=0)
    average_samples_per_identity: float = Field(..., ge=0.0)

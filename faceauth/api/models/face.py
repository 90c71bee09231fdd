"""API models for descriptor comparison, matching and encoding."""
from typing import List, Optional

from pydantic import BaseModel, Field

from faceauth.core.config import settings
from faceauth.domain.value_objects.recognition import EvaluationMetrics, MatchEntry, MatchResult


class SimilarityRequest(BaseModel):
    """Request model for the /face/similarity endpoint."""
    face1: List[float] = Field(..., description="First face descriptor")
    face2: List[float] = Field(..., description="Second face descriptor")


class MatchRequest(BaseModel):
    """Request model for the /face/match endpoint."""
    probe_face: List[float] = Field(..., description="Descriptor to match against the population")
    threshold: Optional[float] = Field(
        None,
        description="Similarity threshold (0.0 to 1.0); server default when omitted",
        ge=0.0, le=1.0
    )
    max_matches: Optional[int] = Field(
        None,
        ge=1,
        le=settings.MAX_MATCHES,
        description=f"Number of top matches to return (1-{settings.MAX_MATCHES}); all when omitted"
    )


class MatchResponse(BaseModel):
    """Response model for the /face/match endpoint."""
    matches: List[MatchEntry] = Field(..., description="Matches, similarity descending")
    threshold: float = Field(..., description="Similarity threshold applied")
    metrics: EvaluationMetrics = Field(..., description="Metrics over the whole population")

    @classmethod
    def from_service_response(
        cls, result: MatchResult, max_matches: Optional[int] = None
    ) -> "MatchResponse":
        """Convert the service result, keeping at most ``max_matches`` rows."""
        matches = result.matches if max_matches is None else result.matches[:max_matches]
        return cls(matches=matches, threshold=result.threshold, metrics=result.metrics)


class EncodeDescriptorRequest(BaseModel):
    """Request model for the /descriptors/encode endpoint."""
    descriptor: List[float] = Field(..., description="Descriptor to encode")


class DescriptorTokenModel(BaseModel):
    """Encoded descriptor token."""
    token: str = Field(..., description="Token of the form <base36 timestamp>:<base64 JSON>")


class DecodedDescriptorResponse(BaseModel):
    """Response model for the /descriptors/decode endpoint."""
    descriptor: List[float] = Field(..., description="Decoded descriptor")

"""API models for identities, enrollment and authentication."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from faceauth.domain.entities.identity import FaceSample, Identity


class RegisterRequest(BaseModel):
    """Request model for the /users endpoint."""
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    face_descriptor: Optional[List[float]] = Field(
        None, description="Descriptor to enroll; omit for a password-only identity"
    )


class IdentityResponse(BaseModel):
    """Public view of an identity. The descriptor itself is never returned."""
    id: str
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    face_enrolled: bool = Field(..., description="Whether a canonical descriptor is enrolled")

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityResponse":
        return cls(
            id=identity.id,
            username=identity.username,
            email=identity.email,
            first_name=identity.first_name,
            last_name=identity.last_name,
            face_enrolled=identity.is_enrolled,
        )


class FaceSampleRequest(BaseModel):
    """Request model for the /users/{identity}/face-samples endpoint."""
    face_descriptor: List[float] = Field(..., description="Captured descriptor")


class FaceSampleResponse(BaseModel):
    """Response model for a stored face sample."""
    id: str
    identity_id: str
    timestamp: datetime

    @classmethod
    def from_face_sample(cls, sample: FaceSample) -> "FaceSampleResponse":
        return cls(id=sample.id, identity_id=sample.identity_id, timestamp=sample.timestamp)


class LoginRequest(BaseModel):
    """Request model for the /auth/login endpoint."""
    identity: str = Field(..., min_length=1, description="Identity id, email or username")
    face_descriptor: List[float] = Field(..., description="Freshly captured descriptor")
    threshold: Optional[float] = Field(None, gt=0.0, description="Distance threshold override")


class LoginResponse(BaseModel):
    """Response model for a successful face login."""
    identity: IdentityResponse
    authenticated: bool
    distance: float
    similarity: float
    threshold: float


class GroupMemberRequest(BaseModel):
    """A group member presenting a face."""
    identity: str = Field(..., min_length=1, description="Identity id, email or username")
    face_descriptor: List[float] = Field(..., description="Freshly captured descriptor")


class GroupAuthRequest(BaseModel):
    """Request model for the /auth/group endpoint."""
    members: List[GroupMemberRequest] = Field(..., description="Members in presentation order")
    required_count: Optional[int] = Field(
        None, ge=1, description="Members that must authenticate; all when omitted"
    )
    threshold: Optional[float] = Field(None, gt=0.0, description="Distance threshold override")

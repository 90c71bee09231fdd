"""Core identity domain entities."""
from datetime import datetime
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from faceauth.services.vector_math import as_descriptor


class DisplayInfo(BaseModel):
    """Display metadata used to annotate match and group results."""
    display_name: str = Field(..., description="First and last name, trimmed")
    handle: str = Field(..., description="Username of the identity")


class Identity(BaseModel):
    """A user that may carry one canonical (enrolled) face descriptor."""
    id: str = Field(..., description="Store-issued identifier")
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="Unique email address")
    first_name: Optional[str] = Field(None, description="Given name")
    last_name: Optional[str] = Field(None, description="Family name")
    face_descriptor: Optional[np.ndarray] = Field(
        None, description="Canonical descriptor, None for password-only identities"
    )
    created_at: Optional[datetime] = Field(None, description="When the identity was registered")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("face_descriptor", mode="before")
    @classmethod
    def validate_descriptor(cls, v) -> Optional[np.ndarray]:
        """Coerce the descriptor to a read-only numpy array."""
        if v is None:
            return None
        return as_descriptor(v)

    @property
    def is_enrolled(self) -> bool:
        """Whether the identity has a canonical descriptor."""
        return self.face_descriptor is not None

    @property
    def display_info(self) -> DisplayInfo:
        """Display metadata derived from the identity."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return DisplayInfo(display_name=name, handle=self.username)


class FaceSample(BaseModel):
    """Historical face descriptor captured for an identity."""
    id: str = Field(..., description="Store-issued identifier")
    identity_id: str = Field(..., description="Owning identity")
    descriptor: np.ndarray = Field(..., description="Captured descriptor")
    timestamp: datetime = Field(..., description="Capture time (UTC)")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("descriptor", mode="before")
    @classmethod
    def validate_descriptor(cls, v) -> np.ndarray:
        return as_descriptor(v)


class MatchCandidate(BaseModel):
    """Enrolled (identity, descriptor) pair drawn from a population."""
    identity_id: str = Field(..., description="Identity the descriptor belongs to")
    descriptor: np.ndarray = Field(..., description="Enrolled descriptor")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("descriptor", mode="before")
    @classmethod
    def validate_descriptor(cls, v) -> np.ndarray:
        return as_descriptor(v)

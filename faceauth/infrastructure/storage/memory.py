"""In-memory implementation of the identity store."""
import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

import numpy as np

from faceauth.core.exceptions import IdentityAlreadyExistsError, IdentityNotFoundError
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import FaceSample, Identity, MatchCandidate
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.services.vector_math import as_descriptor

logger = get_logger(__name__)


class InMemoryIdentityStore(IdentityStore):
    """Dict-backed identity store for development and tests.

    Identities keep insertion order, which is also the population order.
    Writes are serialized with an asyncio lock; reads return copies.
    """

    def __init__(self) -> None:
        self._identities: Dict[str, Identity] = {}
        self._samples: Dict[str, List[FaceSample]] = {}
        self._lock = asyncio.Lock()

    def _find(self, identity_ref: str) -> Optional[Identity]:
        identity = self._identities.get(identity_ref)
        if identity is not None:
            return identity
        for candidate in self._identities.values():
            if identity_ref in (candidate.email, candidate.username):
                return candidate
        return None

    def _require(self, identity_ref: str) -> Identity:
        identity = self._find(identity_ref)
        if identity is None:
            raise IdentityNotFoundError(
                f"Identity not found: {identity_ref}", details={"identity": identity_ref}
            )
        return identity

    async def get_identity(self, identity_ref: str) -> Optional[Identity]:
        identity = self._find(identity_ref)
        return identity.model_copy() if identity is not None else None

    async def list_population(self) -> List[MatchCandidate]:
        return [
            MatchCandidate(identity_id=identity.id, descriptor=identity.face_descriptor)
            for identity in self._identities.values()
            if identity.face_descriptor is not None
        ]

    async def list_identities(self) -> List[Identity]:
        return [identity.model_copy() for identity in self._identities.values()]

    async def create_identity(
        self,
        username: str,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        face_descriptor: Optional[np.ndarray] = None,
    ) -> Identity:
        async with self._lock:
            for existing in self._identities.values():
                if existing.email == email or existing.username == username:
                    raise IdentityAlreadyExistsError(
                        "An identity with this email or username already exists",
                        details={"email": email, "username": username},
                    )

            identity = Identity(
                id=str(uuid.uuid4()),
                username=username,
                email=email,
                first_name=first_name,
                last_name=last_name,
                face_descriptor=face_descriptor,
                created_at=datetime.now(timezone.utc),
            )
            self._identities[identity.id] = identity
            self._samples[identity.id] = []

        logger.debug("Stored identity", identity_id=identity.id)
        return identity.model_copy()

    async def set_enrolled_descriptor(self, identity_ref: str, descriptor: np.ndarray) -> Identity:
        async with self._lock:
            identity = self._require(identity_ref)
            # model_copy(update=...) skips validation
            updated = identity.model_copy(update={"face_descriptor": as_descriptor(descriptor)})
            self._identities[identity.id] = updated
        return updated.model_copy()

    async def set_enrolled_descriptor_if_absent(self, identity_ref: str, descriptor: np.ndarray) -> bool:
        async with self._lock:
            identity = self._require(identity_ref)
            if identity.is_enrolled:
                return False
            self._identities[identity.id] = identity.model_copy(
                update={"face_descriptor": as_descriptor(descriptor)}
            )
        return True

    async def add_face_sample(self, identity_ref: str, descriptor: np.ndarray) -> FaceSample:
        async with self._lock:
            identity = self._require(identity_ref)
            sample = FaceSample(
                id=str(uuid.uuid4()),
                identity_id=identity.id,
                descriptor=descriptor,
                timestamp=datetime.now(timezone.utc),
            )
            self._samples[identity.id].append(sample)
        return sample

    async def list_face_samples(self, identity_ref: str) -> List[FaceSample]:
        identity = self._find(identity_ref)
        if identity is None:
            return []
        return list(self._samples.get(identity.id, []))

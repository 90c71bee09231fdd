"""Identity registration and face sample enrollment."""
from typing import Optional

import numpy as np

from faceauth.core.config import settings
from faceauth.core.exceptions import DimensionMismatchError, IdentityNotFoundError
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import FaceSample, Identity
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.domain.value_objects.recognition import EnrollmentStatistics
from faceauth.services.vector_math import DescriptorLike, as_descriptor

logger = get_logger(__name__)


class EnrollmentService:
    """Registers identities and records their face samples.

    The first descriptor an identity provides becomes its canonical
    descriptor. Every descriptor is also appended to the identity's sample
    history. Id allocation and persistence belong to the identity store.
    """

    def __init__(
        self,
        identity_store: IdentityStore,
        expected_dimension: Optional[int] = None,
    ) -> None:
        """Initialize the enrollment service.

        Args:
            identity_store: Store that persists identities and samples
            expected_dimension: Required descriptor length; defaults to
                EXPECTED_DESCRIPTOR_DIMENSION, None accepts any length
        """
        self.identity_store = identity_store
        self.expected_dimension = (
            settings.EXPECTED_DESCRIPTOR_DIMENSION if expected_dimension is None else expected_dimension
        )

    def _validate(self, descriptor: DescriptorLike) -> np.ndarray:
        array = as_descriptor(descriptor)
        if self.expected_dimension is not None and array.shape[0] != self.expected_dimension:
            raise DimensionMismatchError(self.expected_dimension, array.shape[0])
        return array

    async def register(
        self,
        username: str,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        descriptor: Optional[DescriptorLike] = None,
    ) -> Identity:
        """Register a new identity, optionally enrolling a face descriptor.

        Returns:
            The created identity

        Raises:
            IdentityAlreadyExistsError: If the email or username is taken
            InvalidDescriptorError: If the descriptor is malformed
            DimensionMismatchError: If the descriptor has the wrong length
        """
        array = self._validate(descriptor) if descriptor is not None else None
        identity = await self.identity_store.create_identity(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            face_descriptor=array,
        )
        if array is not None:
            await self.identity_store.add_face_sample(identity.id, array)

        logger.info("Registered identity", identity_id=identity.id, enrolled=identity.is_enrolled)
        return identity

    async def add_face_sample(self, identity_ref: str, descriptor: DescriptorLike) -> FaceSample:
        """Record a face sample; the first one also becomes the canonical descriptor.

        Raises:
            IdentityNotFoundError: If the identity does not exist
            InvalidDescriptorError: If the descriptor is malformed
            DimensionMismatchError: If the descriptor has the wrong length
        """
        array = self._validate(descriptor)
        identity = await self.identity_store.get_identity(identity_ref)
        if identity is None:
            raise IdentityNotFoundError(
                f"Identity not found: {identity_ref}", details={"identity": identity_ref}
            )

        sample = await self.identity_store.add_face_sample(identity.id, array)
        if await self.identity_store.set_enrolled_descriptor_if_absent(identity.id, array):
            logger.info("Enrolled canonical face descriptor", identity_id=identity.id)

        logger.info("Added face sample", identity_id=identity.id, sample_id=sample.id)
        return sample

    async def get_statistics(self) -> EnrollmentStatistics:
        """Summarize enrollment across all identities."""
        identities = await self.identity_store.list_identities()
        total = len(identities)
        enrolled = sum(1 for identity in identities if identity.is_enrolled)

        total_samples = 0
        for identity in identities:
            total_samples += len(await self.identity_store.list_face_samples(identity.id))

        return EnrollmentStatistics(
            total_identities=total,
            with_face_auth=enrolled,
            without_face_auth=total - enrolled,
            percent_with_face_auth=(enrolled / total) * 100 if total else 0.0,
            total_face_samples=total_samples,
            average_samples_per_identity=total_samples / total if total else 0.0,
        )

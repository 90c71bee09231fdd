"""Identity store interface for enrolled face descriptors."""
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from faceauth.core.exceptions import IdentityNotFoundError
from faceauth.domain.entities.identity import DisplayInfo, FaceSample, Identity, MatchCandidate


class IdentityStore(ABC):
    """Interface for reading and writing identities and their face descriptors.

    An identity reference may be the store-issued id, the email or the
    username. The store owns id allocation and consistency; callers treat every
    read as a point-in-time snapshot.
    """

    @abstractmethod
    async def get_identity(self, identity_ref: str) -> Optional[Identity]:
        """
        Look up an identity by id, email or username.

        Args:
            identity_ref: Identity reference

        Returns:
            The identity, or None if nothing matches

        Raises:
            StorageError: If the lookup fails
        """
        pass

    async def get_enrolled_descriptor(self, identity_ref: str) -> Optional[np.ndarray]:
        """
        Get the canonical descriptor of an identity.

        Args:
            identity_ref: Identity reference

        Returns:
            The enrolled descriptor, or None for a password-only identity

        Raises:
            IdentityNotFoundError: If the identity does not exist
        """
        identity = await self.get_identity(identity_ref)
        if identity is None:
            raise IdentityNotFoundError(
                f"Identity not found: {identity_ref}", details={"identity": identity_ref}
            )
        return identity.face_descriptor

    async def resolve_display_info(self, identity_ref: str) -> Optional[DisplayInfo]:
        """
        Resolve display metadata for an identity.

        Returns:
            Display info, or None if the identity cannot be resolved
        """
        identity = await self.get_identity(identity_ref)
        if identity is None:
            return None
        return identity.display_info

    @abstractmethod
    async def list_population(self) -> List[MatchCandidate]:
        """
        List every identity that has an enrolled descriptor.

        Returns:
            Candidates in a stable store order
        """
        pass

    @abstractmethod
    async def list_identities(self) -> List[Identity]:
        """List all identities, enrolled or not."""
        pass

    @abstractmethod
    async def create_identity(
        self,
        username: str,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        face_descriptor: Optional[np.ndarray] = None,
    ) -> Identity:
        """
        Create a new identity.

        Raises:
            IdentityAlreadyExistsError: If the email or username is taken
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def set_enrolled_descriptor(self, identity_ref: str, descriptor: np.ndarray) -> Identity:
        """
        Replace the canonical descriptor of an identity.

        Raises:
            IdentityNotFoundError: If the identity does not exist
        """
        pass

    @abstractmethod
    async def set_enrolled_descriptor_if_absent(self, identity_ref: str, descriptor: np.ndarray) -> bool:
        """
        Set the canonical descriptor only if the identity has none yet.

        The check and the write are a single atomic step, so with concurrent
        callers the first writer wins.

        Returns:
            True if the descriptor was set, False if one was already enrolled

        Raises:
            IdentityNotFoundError: If the identity does not exist
        """
        pass

    @abstractmethod
    async def add_face_sample(self, identity_ref: str, descriptor: np.ndarray) -> FaceSample:
        """
        Append a face sample to the identity's history.

        Raises:
            IdentityNotFoundError: If the identity does not exist
        """
        pass

    @abstractmethod
    async def list_face_samples(self, identity_ref: str) -> List[FaceSample]:
        """List an identity's face samples, oldest first."""
        pass

    async def close(self) -> None:
        """Release any resources held by the store."""
        return None

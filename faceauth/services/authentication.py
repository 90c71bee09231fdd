"""Single-identity face authentication."""
from typing import Optional, Tuple

from faceauth.core.config import settings
from faceauth.core.exceptions import IdentityNotFoundError, NoEnrolledDescriptorError
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import Identity
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.domain.value_objects.recognition import AuthenticationOutcome
from faceauth.services import vector_math
from faceauth.services.vector_math import DescriptorLike

logger = get_logger(__name__)


class AuthenticationService:
    """Decides whether a probe descriptor matches an identity's enrolled one.

    A probe authenticates when its euclidean distance to the stored
    descriptor is strictly below the threshold.
    """

    def __init__(self, identity_store: IdentityStore, threshold: Optional[float] = None) -> None:
        """Initialize the authentication service.

        Args:
            identity_store: Source of enrolled descriptors
            threshold: Default distance threshold (AUTH_DISTANCE_THRESHOLD when None)
        """
        self.identity_store = identity_store
        self.threshold = settings.AUTH_DISTANCE_THRESHOLD if threshold is None else threshold

    def decide(
        self,
        stored: Optional[DescriptorLike],
        probe: DescriptorLike,
        threshold: Optional[float] = None,
    ) -> AuthenticationOutcome:
        """Compare a probe against a stored descriptor.

        Args:
            stored: Enrolled descriptor, None if the identity has no enrollment
            probe: Freshly captured descriptor
            threshold: Distance threshold overriding the service default

        Returns:
            AuthenticationOutcome with the decision, distance and similarity

        Raises:
            NoEnrolledDescriptorError: If ``stored`` is None
            DimensionMismatchError: If the descriptors differ in length
        """
        if stored is None:
            raise NoEnrolledDescriptorError("Identity has no enrolled face descriptor")

        limit = self.threshold if threshold is None else threshold
        distance = vector_math.euclidean(stored, probe)
        return AuthenticationOutcome(
            authenticated=distance < limit,
            distance=distance,
            similarity=vector_math.distance_to_similarity(distance),
            threshold=limit,
        )

    async def authenticate_identity(
        self,
        identity_ref: str,
        probe: DescriptorLike,
        threshold: Optional[float] = None,
    ) -> Tuple[Identity, AuthenticationOutcome]:
        """Authenticate an identity by face, returning the identity it resolved to.

        The identity is read once, so the outcome and the returned identity
        always come from the same snapshot.

        Args:
            identity_ref: Identity id, email or username
            probe: Freshly captured descriptor
            threshold: Distance threshold overriding the service default

        Returns:
            Tuple of the resolved identity and the AuthenticationOutcome

        Raises:
            IdentityNotFoundError: If the identity does not exist
            NoEnrolledDescriptorError: If the identity has no enrolled descriptor;
                the caller should fall back to another authentication method
            DimensionMismatchError: If the descriptors differ in length
        """
        identity = await self.identity_store.get_identity(identity_ref)
        if identity is None:
            raise IdentityNotFoundError(
                f"Identity not found: {identity_ref}", details={"identity": identity_ref}
            )
        if not identity.is_enrolled:
            logger.info("Identity has no face enrollment", identity=identity_ref)

        outcome = self.decide(identity.face_descriptor, probe, threshold)
        logger.info(
            "Face authentication evaluated",
            identity=identity_ref,
            authenticated=outcome.authenticated,
            distance=outcome.distance,
        )
        return identity, outcome

    async def authenticate(
        self,
        identity_ref: str,
        probe: DescriptorLike,
        threshold: Optional[float] = None,
    ) -> AuthenticationOutcome:
        """Authenticate an identity by face.

        Raises:
            IdentityNotFoundError: If the identity does not exist
            NoEnrolledDescriptorError: If the identity has no enrolled descriptor
            DimensionMismatchError: If the descriptors differ in length
        """
        _, outcome = await self.authenticate_identity(identity_ref, probe, threshold)
        return outcome

"""Group (quorum) face authentication."""
import asyncio
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from faceauth.core.exceptions import EmptyGroupError, IdentityNotFoundError
from faceauth.core.logging import get_logger
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.domain.value_objects.recognition import GroupAuthResult, GroupMemberResult
from faceauth.services.authentication import AuthenticationService
from faceauth.services.vector_math import DescriptorLike, as_descriptor

logger = get_logger(__name__)

NO_IDENTITY_ERROR = "identity not found"
NO_ENROLLMENT_ERROR = "no enrollment"

GroupMember = Tuple[str, DescriptorLike]


class GroupAuthenticationService:
    """Authenticates a group of people against a required quorum.

    Every member is evaluated, concurrently and without short-circuiting, so
    the caller always receives the full per-member report. Members whose
    identity is unknown or not enrolled fail softly in their own result slot.
    Structural errors (a malformed probe or a dimension mismatch) abort the
    whole call.

    Example:
        ```python
        service = GroupAuthenticationService(store, AuthenticationService(store))
        result = await service.authenticate_group(
            [("alice@example.com", probe_a), ("bob@example.com", probe_b)],
            required_count=1,
        )
        ```
    """

    def __init__(self, identity_store: IdentityStore, authentication: AuthenticationService) -> None:
        """Initialize the group authentication service.

        Args:
            identity_store: Source of enrolled descriptors and display info
            authentication: Single-identity decision logic
        """
        self.identity_store = identity_store
        self.authentication = authentication

    async def _evaluate_member(
        self,
        identity_ref: str,
        probe: DescriptorLike,
        threshold: Optional[float],
    ) -> GroupMemberResult:
        try:
            stored = await self.identity_store.get_enrolled_descriptor(identity_ref)
        except IdentityNotFoundError:
            logger.warning("Group member identity not found", identity=identity_ref)
            return GroupMemberResult(
                identity=identity_ref, authenticated=False, error=NO_IDENTITY_ERROR
            )

        display = await self.identity_store.resolve_display_info(identity_ref)
        handle = display.handle if display else None
        display_name = display.display_name if display else None

        if stored is None:
            return GroupMemberResult(
                identity=identity_ref,
                authenticated=False,
                handle=handle,
                display_name=display_name,
                error=NO_ENROLLMENT_ERROR,
            )

        outcome = self.authentication.decide(stored, probe, threshold)
        return GroupMemberResult(
            identity=identity_ref,
            authenticated=outcome.authenticated,
            distance=outcome.distance,
            similarity=outcome.similarity,
            handle=handle,
            display_name=display_name,
        )

    async def authenticate_group(
        self,
        members: Sequence[GroupMember],
        required_count: Optional[int] = None,
        threshold: Optional[float] = None,
    ) -> GroupAuthResult:
        """Authenticate a group of (identity reference, probe) pairs.

        Args:
            members: Ordered identity references with their probe descriptors
            required_count: Members that must authenticate; defaults to all of them
            threshold: Distance threshold overriding the service default

        Returns:
            GroupAuthResult with per-member results in input order

        Raises:
            EmptyGroupError: If no members are given
            ValueError: If required_count is less than 1
            InvalidDescriptorError: If a probe is not a descriptor
            DimensionMismatchError: If a probe differs in length from its enrollment
        """
        if not members:
            raise EmptyGroupError("Group authentication requires at least one member")

        required = len(members) if required_count is None else required_count
        if required < 1:
            raise ValueError(f"required_count must be at least 1, got {required}")

        probes = [(ref, as_descriptor(probe)) for ref, probe in members]

        results = await asyncio.gather(
            *(self._evaluate_member(ref, probe, threshold) for ref, probe in probes)
        )

        authenticated_count = sum(1 for r in results if r.authenticated)
        group_authenticated = authenticated_count >= required
        logger.info(
            "Group authentication evaluated",
            total_members=len(results),
            authenticated_count=authenticated_count,
            required_count=required,
            group_authenticated=group_authenticated,
        )

        return GroupAuthResult(
            group_authenticated=group_authenticated,
            authenticated_count=authenticated_count,
            required_count=required,
            total_members=len(results),
            members=list(results),
            timestamp=datetime.now(timezone.utc),
        )

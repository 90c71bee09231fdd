"""Database repositories for the face authentication service."""
import uuid
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from faceauth.infrastructure.database.models import FaceSampleRecord, IdentityRecord


def _parse_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except (TypeError, ValueError):
        return None


class IdentityRepository:
    """Repository for identity operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Database session
        """
        self._session = session

    async def get_by_ref(self, identity_ref: str) -> Optional[IdentityRecord]:
        """Get an identity by id, email or username.

        Args:
            identity_ref: Identity reference

        Returns:
            Optional[IdentityRecord]: Found identity, or None
        """
        conditions = [
            IdentityRecord.email == identity_ref,
            IdentityRecord.username == identity_ref,
        ]
        identity_id = _parse_uuid(identity_ref)
        if identity_id is not None:
            conditions.append(IdentityRecord.id == identity_id)

        stmt = select(IdentityRecord).where(or_(*conditions)).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, username: str, email: str) -> bool:
        """Check whether the username or email is already registered."""
        stmt = select(func.count()).select_from(IdentityRecord).where(
            or_(IdentityRecord.username == username, IdentityRecord.email == email)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one() > 0

    async def list_all(self, enrolled_only: bool = False) -> List[IdentityRecord]:
        """List identities in registration order.

        Args:
            enrolled_only: Only return identities with a canonical descriptor

        Returns:
            List[IdentityRecord]: Found identities
        """
        stmt = select(IdentityRecord).order_by(IdentityRecord.created_at, IdentityRecord.id)
        if enrolled_only:
            stmt = stmt.where(IdentityRecord.face_descriptor.is_not(None))
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def set_descriptor_if_absent(self, identity_id: uuid.UUID, descriptor: List[float]) -> bool:
        """Set the canonical descriptor with a conditional UPDATE.

        Args:
            identity_id: Identity to enroll
            descriptor: Descriptor values

        Returns:
            bool: True if a row was updated, False if a descriptor was already set
        """
        stmt = (
            update(IdentityRecord)
            .where(IdentityRecord.id == identity_id, IdentityRecord.face_descriptor.is_(None))
            .values(face_descriptor=descriptor)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def create(
        self,
        username: str,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        face_descriptor: Optional[List[float]] = None
    ) -> IdentityRecord:
        """Create a new identity record.

        Returns:
            IdentityRecord: Created identity
        """
        record = IdentityRecord(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            face_descriptor=face_descriptor
        )
        self._session.add(record)
        await self._session.flush()
        return record


class FaceSampleRepository:
    """Repository for face sample operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Database session
        """
        self._session = session

    async def create(self, identity_id: uuid.UUID, descriptor: List[float]) -> FaceSampleRecord:
        """Append a face sample.

        Args:
            identity_id: Owning identity
            descriptor: Captured descriptor values

        Returns:
            FaceSampleRecord: Created sample
        """
        record = FaceSampleRecord(identity_id=identity_id, descriptor=descriptor)
        self._session.add(record)
        await self._session.flush()
        return record

    async def list_by_identity(self, identity_id: uuid.UUID) -> List[FaceSampleRecord]:
        """List an identity's samples, oldest first."""
        stmt = (
            select(FaceSampleRecord)
            .where(FaceSampleRecord.identity_id == identity_id)
            .order_by(FaceSampleRecord.timestamp)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

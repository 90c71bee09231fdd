"""Transaction scope over the identity and face sample tables."""
from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

from faceauth.core.exceptions import IdentityNotFoundError
from faceauth.infrastructure.database.models import IdentityRecord
from faceauth.infrastructure.database.repositories import FaceSampleRepository, IdentityRepository


class UnitOfWork:
    """One identity store operation: commits on a clean exit, rolls back on error.

    Example:
        ```python
        async with UnitOfWork(session) as uow:
            record = await uow.require_identity("alice@example.com")
            await uow.face_samples.create(record.id, descriptor)
        ```
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.identities = IdentityRepository(session)
        self.face_samples = FaceSampleRepository(session)

    async def require_identity(self, identity_ref: str) -> IdentityRecord:
        """Resolve an identity reference or raise IdentityNotFoundError."""
        record = await self.identities.get_by_ref(identity_ref)
        if record is None:
            raise IdentityNotFoundError(
                f"Identity not found: {identity_ref}", details={"identity": identity_ref}
            )
        return record

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            await self.session.commit()
        else:
            await self.session.rollback()

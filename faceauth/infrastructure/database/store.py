"""SQLAlchemy implementation of the identity store."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

import numpy as np
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from faceauth.core.exceptions import IdentityAlreadyExistsError, StorageError
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import FaceSample, Identity, MatchCandidate
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.infrastructure.database.models import Base, FaceSampleRecord, IdentityRecord
from faceauth.infrastructure.database.session import create_session_factory, get_db_session
from faceauth.infrastructure.database.unit_of_work import UnitOfWork

logger = get_logger(__name__)


def _to_identity(record: IdentityRecord) -> Identity:
    return Identity(
        id=str(record.id),
        username=record.username,
        email=record.email,
        first_name=record.first_name,
        last_name=record.last_name,
        face_descriptor=record.face_descriptor,
        created_at=record.created_at,
    )


def _to_face_sample(record: FaceSampleRecord) -> FaceSample:
    return FaceSample(
        id=str(record.id),
        identity_id=str(record.identity_id),
        descriptor=record.descriptor,
        timestamp=record.timestamp,
    )


class SqlAlchemyIdentityStore(IdentityStore):
    """Identity store persisting to a relational database.

    Descriptors are stored as JSON arrays, which preserves every float
    exactly. Each operation runs in its own unit of work.

    Example:
        ```python
        store = SqlAlchemyIdentityStore.from_url("sqlite+aiosqlite:///faceauth.db")
        await store.initialize()
        identity = await store.get_identity("alice@example.com")
        await store.close()
        ```
    """

    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker) -> None:
        """Initialize the store.

        Args:
            engine: Async engine used for schema creation and disposal
            session_factory: Factory producing sessions bound to the engine
        """
        self._engine = engine
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False, **engine_kwargs) -> "SqlAlchemyIdentityStore":
        """Create a store for a database URL."""
        engine, session_factory = create_session_factory(database_url, echo=echo, **engine_kwargs)
        return cls(engine, session_factory)

    async def initialize(self) -> None:
        """Create missing tables."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def close(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncGenerator[UnitOfWork, None]:
        try:
            async with get_db_session(self._session_factory) as session:
                async with UnitOfWork(session) as uow:
                    yield uow
        except IntegrityError as e:
            raise IdentityAlreadyExistsError(
                "An identity with this email or username already exists",
                details={"error": str(e.orig)},
            )
        except SQLAlchemyError as e:
            raise StorageError(f"Identity store operation failed: {e}")

    async def get_identity(self, identity_ref: str) -> Optional[Identity]:
        async with self._unit_of_work() as uow:
            record = await uow.identities.get_by_ref(identity_ref)
            return _to_identity(record) if record is not None else None

    async def list_population(self) -> List[MatchCandidate]:
        async with self._unit_of_work() as uow:
            records = await uow.identities.list_all(enrolled_only=True)
            return [
                MatchCandidate(identity_id=str(record.id), descriptor=record.face_descriptor)
                for record in records
            ]

    async def list_identities(self) -> List[Identity]:
        async with self._unit_of_work() as uow:
            return [_to_identity(record) for record in await uow.identities.list_all()]

    async def create_identity(
        self,
        username: str,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        face_descriptor: Optional[np.ndarray] = None,
    ) -> Identity:
        async with self._unit_of_work() as uow:
            if await uow.identities.exists(username, email):
                raise IdentityAlreadyExistsError(
                    "An identity with this email or username already exists",
                    details={"email": email, "username": username},
                )
            record = await uow.identities.create(
                username=username,
                email=email,
                first_name=first_name,
                last_name=last_name,
                face_descriptor=(
                    np.asarray(face_descriptor, dtype=np.float64).tolist()
                    if face_descriptor is not None else None
                ),
            )
            return _to_identity(record)

    async def set_enrolled_descriptor(self, identity_ref: str, descriptor: np.ndarray) -> Identity:
        async with self._unit_of_work() as uow:
            record = await uow.require_identity(identity_ref)
            record.face_descriptor = np.asarray(descriptor, dtype=np.float64).tolist()
            return _to_identity(record)

    async def set_enrolled_descriptor_if_absent(self, identity_ref: str, descriptor: np.ndarray) -> bool:
        async with self._unit_of_work() as uow:
            record = await uow.require_identity(identity_ref)
            return await uow.identities.set_descriptor_if_absent(
                record.id, np.asarray(descriptor, dtype=np.float64).tolist()
            )

    async def add_face_sample(self, identity_ref: str, descriptor: np.ndarray) -> FaceSample:
        async with self._unit_of_work() as uow:
            record = await uow.require_identity(identity_ref)
            sample = await uow.face_samples.create(
                record.id, np.asarray(descriptor, dtype=np.float64).tolist()
            )
            return _to_face_sample(sample)

    async def list_face_samples(self, identity_ref: str) -> List[FaceSample]:
        async with self._unit_of_work() as uow:
            record = await uow.identities.get_by_ref(identity_ref)
            if record is None:
                return []
            samples = await uow.face_samples.list_by_identity(record.id)
            return [_to_face_sample(sample) for sample in samples]

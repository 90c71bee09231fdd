"""Service container for dependency injection."""
from typing import Optional

from faceauth.core.config import settings
from faceauth.core.logging import get_logger
from faceauth.domain.interfaces.scoring.score_simulator import ScoreSimulator
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.infrastructure.database import SqlAlchemyIdentityStore
from faceauth.infrastructure.storage import InMemoryIdentityStore
from faceauth.services.authentication import AuthenticationService
from faceauth.services.descriptor_codec import DescriptorCodec
from faceauth.services.enrollment import EnrollmentService
from faceauth.services.group_authentication import GroupAuthenticationService
from faceauth.services.population_matching import PopulationMatchingService
from faceauth.services.score_simulation import RandomScoreSimulator
from faceauth.services.similarity_fusion import SimilarityFusionService

logger = get_logger(__name__)


class ServiceContainer:
    """Container for application services.

    This container manages the lifecycle and dependencies of all services in the application.
    It ensures proper initialization order and provides a single source of truth for service instances.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()

        matcher = container.population_matching_service
        ```
    """

    def __init__(self) -> None:
        """Initialize empty container."""
        # Collaborators - Use interface type hints
        self.identity_store: Optional[IdentityStore] = None
        self.score_simulator: Optional[ScoreSimulator] = None

        # Domain services
        self.descriptor_codec: Optional[DescriptorCodec] = None
        self.similarity_fusion_service: Optional[SimilarityFusionService] = None
        self.authentication_service: Optional[AuthenticationService] = None
        self.group_authentication_service: Optional[GroupAuthenticationService] = None
        self.population_matching_service: Optional[PopulationMatchingService] = None
        self.enrollment_service: Optional[EnrollmentService] = None

    @property
    def is_initialized(self) -> bool:
        return self.identity_store is not None

    async def _create_identity_store(self) -> IdentityStore:
        backend = settings.STORAGE_BACKEND.lower()
        if backend == "memory":
            return InMemoryIdentityStore()
        if backend == "database":
            engine_kwargs = {}
            if not settings.DATABASE_URL.startswith("sqlite"):
                engine_kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
            store = SqlAlchemyIdentityStore.from_url(
                settings.DATABASE_URL, echo=settings.DATABASE_ECHO, **engine_kwargs
            )
            await store.initialize()
            return store
        raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")

    async def initialize(
        self,
        identity_store: Optional[IdentityStore] = None,
        score_simulator: Optional[ScoreSimulator] = None,
    ) -> None:
        """Initialize all services in the correct order.

        Args:
            identity_store: Store to use instead of the configured backend
            score_simulator: Simulator to use instead of a RandomScoreSimulator
                seeded from SCORE_SIMULATOR_SEED
        """
        self.identity_store = identity_store or await self._create_identity_store()
        self.score_simulator = score_simulator or RandomScoreSimulator(seed=settings.SCORE_SIMULATOR_SEED)

        self.descriptor_codec = DescriptorCodec()
        self.similarity_fusion_service = SimilarityFusionService(self.score_simulator)
        self.authentication_service = AuthenticationService(self.identity_store)
        self.group_authentication_service = GroupAuthenticationService(
            identity_store=self.identity_store,
            authentication=self.authentication_service,
        )
        self.population_matching_service = PopulationMatchingService(
            identity_store=self.identity_store,
            score_simulator=self.score_simulator,
        )
        self.enrollment_service = EnrollmentService(self.identity_store)
        logger.info(
            "Service container initialized",
            identity_store=type(self.identity_store).__name__,
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        self.enrollment_service = None
        self.population_matching_service = None
        self.group_authentication_service = None
        self.authentication_service = None
        self.similarity_fusion_service = None
        self.descriptor_codec = None
        self.score_simulator = None

        if self.identity_store:
            await self.identity_store.close()
            self.identity_store = None


# Global container instance
container = ServiceContainer()

"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends

from faceauth.core.container import ServiceContainer, container
from faceauth.core.exceptions import ServiceNotInitializedError
from faceauth.services.authentication import AuthenticationService
from faceauth.services.descriptor_codec import DescriptorCodec
from faceauth.services.enrollment import EnrollmentService
from faceauth.services.group_authentication import GroupAuthenticationService
from faceauth.services.population_matching import PopulationMatchingService
from faceauth.services.similarity_fusion import SimilarityFusionService


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    if not container.is_initialized:
        try:
            await container.initialize()
        except Exception as e:
            raise ServiceNotInitializedError(f"Service container could not be initialized: {e}")
    return container


def _require(service, name: str):
    if service is None:
        raise ServiceNotInitializedError(f"{name} not found in initialized container")
    return service


async def get_similarity_fusion_service(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[SimilarityFusionService, None]:
    """Provide the similarity fusion service."""
    yield _require(cont.similarity_fusion_service, "SimilarityFusionService")


async def get_authentication_service(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[AuthenticationService, None]:
    """Provide the authentication service."""
    yield _require(cont.authentication_service, "AuthenticationService")


async def get_group_authentication_service(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[GroupAuthenticationService, None]:
    """Provide the group authentication service."""
    yield _require(cont.group_authentication_service, "GroupAuthenticationService")


async def get_population_matching_service(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[PopulationMatchingService, None]:
    """Provide the population matching service."""
    yield _require(cont.population_matching_service, "PopulationMatchingService")


async def get_enrollment_service(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[EnrollmentService, None]:
    """Provide the enrollment service."""
    yield _require(cont.enrollment_service, "EnrollmentService")


async def get_descriptor_codec(
    cont: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[DescriptorCodec, None]:
    """Provide the descriptor codec."""
    yield _require(cont.descriptor_codec, "DescriptorCodec")

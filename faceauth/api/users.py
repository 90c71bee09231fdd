"""Identity registration, enrollment and statistics endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from faceauth.api.models.identity import (
    FaceSampleRequest,
    FaceSampleResponse,
    IdentityResponse,
    RegisterRequest,
)
from faceauth.core.exceptions import (
    DimensionMismatchError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
    InvalidDescriptorError,
    StorageError,
)
from faceauth.core.logging import get_logger
from faceauth.domain.value_objects.recognition import EnrollmentStatistics
from faceauth.infrastructure.dependencies import get_enrollment_service
from faceauth.services.enrollment import EnrollmentService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        400: {"description": "Invalid request"},
        500: {"description": "Internal server error"}
    }
)


@router.post(
    "/users",
    response_model=IdentityResponse,
    status_code=201,
    summary="Register an identity",
    responses={409: {"description": "Email or username already registered"}},
)
async def register(
    request: RegisterRequest,
    service: EnrollmentService = Depends(get_enrollment_service)
) -> IdentityResponse:
    """Register an identity, enrolling a face when a descriptor is supplied."""
    try:
        identity = await service.register(
            username=request.username,
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            descriptor=request.face_descriptor,
        )
        return IdentityResponse.from_identity(identity)
    except IdentityAlreadyExistsError:
        raise HTTPException(status_code=409, detail="Identity already exists")
    except (DimensionMismatchError, InvalidDescriptorError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        logger.error("Failed to store identity", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to store identity")


@router.post(
    "/users/{identity}/face-samples",
    response_model=FaceSampleResponse,
    status_code=201,
    summary="Add a face sample",
    description="Appends a sample; the first sample also becomes the canonical descriptor.",
    responses={404: {"description": "Identity not found"}},
)
async def add_face_sample(
    identity: str,
    request: FaceSampleRequest,
    service: EnrollmentService = Depends(get_enrollment_service)
) -> FaceSampleResponse:
    """Record a face sample for an identity."""
    try:
        sample = await service.add_face_sample(identity, request.face_descriptor)
        return FaceSampleResponse.from_face_sample(sample)
    except IdentityNotFoundError:
        raise HTTPException(status_code=404, detail="Identity not found")
    except (DimensionMismatchError, InvalidDescriptorError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        logger.error("Failed to store face sample", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to store face sample")


@router.get(
    "/admin/stats",
    response_model=EnrollmentStatistics,
    summary="Enrollment statistics",
)
async def enrollment_statistics(
    service: EnrollmentService = Depends(get_enrollment_service)
) -> EnrollmentStatistics:
    """Summarize enrollment across identities."""
    return await service.get_statistics()

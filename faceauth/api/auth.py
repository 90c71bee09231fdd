"""Face authentication endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from faceauth.api.models.identity import (
    GroupAuthRequest,
    IdentityResponse,
    LoginRequest,
    LoginResponse,
)
from faceauth.core.exceptions import (
    DimensionMismatchError,
    EmptyGroupError,
    IdentityNotFoundError,
    InvalidDescriptorError,
    NoEnrolledDescriptorError,
)
from faceauth.core.logging import get_logger
from faceauth.domain.value_objects.recognition import GroupAuthResult
from faceauth.infrastructure.dependencies import (
    get_authentication_service,
    get_group_authentication_service,
)
from faceauth.services.authentication import AuthenticationService
from faceauth.services.group_authentication import GroupAuthenticationService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        400: {"description": "Invalid request"},
        500: {"description": "Internal server error"}
    }
)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Authenticate an identity by face",
    responses={
        401: {"description": "Face did not match"},
        404: {"description": "Identity not found"},
        409: {"description": "Identity has no face enrollment; use an alternative method"},
    },
)
async def login(
    request: LoginRequest,
    service: AuthenticationService = Depends(get_authentication_service)
) -> LoginResponse:
    """Authenticate one identity with a probe descriptor.

    Raises:
        HTTPException: If the identity is unknown, not enrolled, or does not match
    """
    try:
        identity, outcome = await service.authenticate_identity(
            request.identity, request.face_descriptor, request.threshold
        )
    except IdentityNotFoundError as e:
        logger.warning("Login for unknown identity", error=str(e))
        raise HTTPException(status_code=404, detail="Identity not found")
    except NoEnrolledDescriptorError:
        raise HTTPException(
            status_code=409,
            detail="No face enrolled for this identity; use an alternative authentication method",
        )
    except (DimensionMismatchError, InvalidDescriptorError) as e:
        logger.warning("Rejected login descriptor", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    if not outcome.authenticated:
        raise HTTPException(status_code=401, detail="Authentication failed")

    return LoginResponse(
        identity=IdentityResponse.from_identity(identity),
        **outcome.model_dump(),
    )


@router.post(
    "/group",
    response_model=GroupAuthResult,
    summary="Authenticate a group against a quorum",
    description="Evaluates every member and authenticates the group when at least "
                "required_count members match.",
)
async def authenticate_group(
    request: GroupAuthRequest,
    service: GroupAuthenticationService = Depends(get_group_authentication_service)
) -> GroupAuthResult:
    """Authenticate a group of members.

    Raises:
        HTTPException: 400 for an empty group or a malformed descriptor
    """
    try:
        return await service.authenticate_group(
            [(member.identity, member.face_descriptor) for member in request.members],
            required_count=request.required_count,
            threshold=request.threshold,
        )
    except (EmptyGroupError, DimensionMismatchError, InvalidDescriptorError) as e:
        logger.warning("Rejected group authentication", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during group authentication", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")

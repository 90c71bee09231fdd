"""Descriptor comparison, matching and encoding endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from faceauth.api.models.face import (
    DecodedDescriptorResponse,
    DescriptorTokenModel,
    EncodeDescriptorRequest,
    MatchRequest,
    MatchResponse,
    SimilarityRequest,
)
from faceauth.core.exceptions import (
    DimensionMismatchError,
    InvalidDescriptorError,
    MalformedTokenError,
)
from faceauth.core.logging import get_logger
from faceauth.domain.value_objects.recognition import SimilarityReport
from faceauth.infrastructure.dependencies import (
    get_descriptor_codec,
    get_population_matching_service,
    get_similarity_fusion_service,
)
from faceauth.services.descriptor_codec import DescriptorCodec
from faceauth.services.population_matching import PopulationMatchingService
from faceauth.services.similarity_fusion import SimilarityFusionService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        400: {"description": "Invalid request"},
        500: {"description": "Internal server error"}
    }
)


@router.post(
    "/face/similarity",
    response_model=SimilarityReport,
    summary="Compare two face descriptors",
    description=(
        "Returns euclidean, manhattan and cosine metrics, an overall similarity of "
        "exp(-euclidean), and SIMULATED per-model scores."
    ),
)
def compare_descriptors(
    request: SimilarityRequest,
    service: SimilarityFusionService = Depends(get_similarity_fusion_service)
) -> SimilarityReport:
    """Compare two descriptors.

    Raises:
        HTTPException: 400 if the descriptors are invalid or differ in length
    """
    try:
        return service.fuse(request.face1, request.face2)
    except (DimensionMismatchError, InvalidDescriptorError) as e:
        logger.warning("Rejected descriptor comparison", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/face/match",
    response_model=MatchResponse,
    summary="Match a descriptor against the enrolled population",
    description=(
        "Ranks every enrolled identity by similarity to the probe. tpr, fpr and "
        "accuracy in the metrics are SIMULATED placeholders."
    ),
)
async def match_descriptor(
    request: MatchRequest,
    service: PopulationMatchingService = Depends(get_population_matching_service)
) -> MatchResponse:
    """Match a probe against all enrolled identities.

    Raises:
        HTTPException: 400 if the probe is invalid or differs in length from the population
    """
    try:
        result = await service.match_against_population(request.probe_face, request.threshold)
        return MatchResponse.from_service_response(result, request.max_matches)
    except (DimensionMismatchError, InvalidDescriptorError) as e:
        logger.warning("Rejected population match", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during population matching", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")


@router.post(
    "/descriptors/encode",
    response_model=DescriptorTokenModel,
    summary="Encode a descriptor as a transit token",
)
def encode_descriptor(
    request: EncodeDescriptorRequest,
    codec: DescriptorCodec = Depends(get_descriptor_codec)
) -> DescriptorTokenModel:
    """Encode a descriptor."""
    try:
        return DescriptorTokenModel(token=codec.encode(request.descriptor))
    except InvalidDescriptorError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/descriptors/decode",
    response_model=DecodedDescriptorResponse,
    summary="Decode a transit token back into a descriptor",
)
def decode_descriptor(
    request: DescriptorTokenModel,
    codec: DescriptorCodec = Depends(get_descriptor_codec)
) -> DecodedDescriptorResponse:
    """Decode a descriptor token."""
    try:
        return DecodedDescriptorResponse(descriptor=codec.decode(request.token))
    except MalformedTokenError as e:
        logger.warning("Rejected malformed descriptor token", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

"""Search endpoint: one query in, one SearchResult out."""

from fastapi import APIRouter, Depends, Request, status

from orchestrator.core import SearchOrchestrator
from server.dependencies import get_orchestrator
from server.schemas.requests import SearchRequest
from server.schemas.responses import ErrorResponseDTO, SearchResponseDTO
from server.utils import (
    EMPTY_QUERY_ANSWER,
    EMPTY_QUERY_ERROR,
    SERVICE_UNAVAILABLE_ANSWER,
    SERVICE_UNAVAILABLE_ERROR,
    error_response,
    normalize_query,
)
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Search"])


@router.post(
    "/search",
    response_model=SearchResponseDTO,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponseDTO}, 500: {"model": ErrorResponseDTO}},
)
async def search(
    request: Request,
    body: SearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """
    Run one search.

    Model and network failures are reported inside a 200 response with
    ``hasResults=false``; only an empty query or an unexpected server error
    changes the status code.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    query = normalize_query(body.query)

    if not query:
        logger.info(
            "Rejected empty search query",
            extra={"extra_fields": {"request_id": request_id}},
        )
        return error_response(status.HTTP_400_BAD_REQUEST, EMPTY_QUERY_ERROR, EMPTY_QUERY_ANSWER)

    try:
        result = await orchestrator.search(query, language=body.language, focus=body.focus)
    except Exception as e:
        logger.error(
            f"Search endpoint error: {e}",
            extra={"extra_fields": {"request_id": request_id, "error_type": type(e).__name__}},
            exc_info=True,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            SERVICE_UNAVAILABLE_ERROR,
            SERVICE_UNAVAILABLE_ANSWER,
        )

    return SearchResponseDTO.from_search_result(result)

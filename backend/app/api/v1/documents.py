"""
Document endpoint — render a booking to PDF and return its public URL.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_pipeline
from app.api.schemas.booking import BookingRequest, DocumentUrlResponse, ErrorResponse
from app.core.constants import GENERIC_FAILURE_MESSAGE
from app.core.logging import get_logger
from app.pipeline.engine import PipelineEngine
from app.pipeline.errors import PipelineError

logger = get_logger(__name__)

router = APIRouter(tags=["Documents"])


@router.post(
    "/sangria-fiesta",
    response_model=DocumentUrlResponse,
    responses={500: {"model": ErrorResponse}},
)
async def create_sangria_fiesta(
    booking: BookingRequest,
    pipeline: PipelineEngine = Depends(get_pipeline),
):
    """
    Render the Sangria Fiesta PDF for one booking.

    Any pipeline failure yields the same 500 body; the details are in
    the server log under the execution id.
    """
    try:
        url = await pipeline.process(booking.template_fields())
    except PipelineError as exc:
        logger.warning(
            "Document request failed",
            execution_id=exc.execution_id,
            step_name=exc.step_name,
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": GENERIC_FAILURE_MESSAGE},
        )

    return DocumentUrlResponse(url=url)

"""API schema package."""

from app.api.schemas.booking import BookingRequest, DocumentUrlResponse, ErrorResponse

__all__ = ["BookingRequest", "DocumentUrlResponse", "ErrorResponse"]

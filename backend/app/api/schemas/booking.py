"""Booking request/response schemas."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class BookingRequest(BaseModel):
    """
    The five booking fields merged into the template.

    ``name`` and ``contact`` are accepted as aliases for
    ``restaurant_name`` and ``email``.
    """

    restaurant_name: str = Field(
        ...,
        validation_alias=AliasChoices("restaurant_name", "name"),
    )
    time: str
    date: str
    address: str
    email: str = Field(
        ...,
        validation_alias=AliasChoices("email", "contact"),
    )

    def template_fields(self) -> dict[str, str]:
        """Field values keyed by template placeholder name."""
        return self.model_dump()


class DocumentUrlResponse(BaseModel):
    """Public URL of the published PDF."""

    url: str


class ErrorResponse(BaseModel):
    """Generic failure body; never reveals which stage failed."""

    message: str

"""Shared constants and enums used across the application."""

from enum import StrEnum


PDF_CONTENT_TYPE = "application/pdf"

GENERIC_FAILURE_MESSAGE = "Error generating PDF or uploading to storage"


class PipelineStatus(StrEnum):
    """Overall status of a pipeline execution."""

    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class SubstitutionPolicy(StrEnum):
    """How field values are inserted into the markup template."""

    TRUST = "trust"      # verbatim, caller owns the content
    ESCAPE = "escape"    # HTML-escaped before insertion


class BookingField(StrEnum):
    """Template placeholders, one per booking field."""

    RESTAURANT_NAME = "restaurant_name"
    TIME = "time"
    DATE = "date"
    ADDRESS = "address"
    EMAIL = "email"

    @property
    def placeholder(self) -> str:
        return "{{" + self.value + "}}"

"""
Pipeline Engine — render-and-publish orchestrator.

This package provides the step-based pipeline that turns one booking
into a published PDF: template merge, PDF render, object-store upload,
with per-step logging and uniform error classification.
"""

from app.pipeline.engine import PipelineEngine
from app.pipeline.context import PipelineContext, StepResult
from app.pipeline.step import PipelineStep

__all__ = [
    "PipelineEngine",
    "PipelineContext",
    "PipelineStep",
    "StepResult",
]

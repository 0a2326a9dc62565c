"""
PipelineContext — per-request state handed from step to step.

The template step fills ``markup``, the render step fills ``pdf_bytes``
and the publish step fills ``public_url``.  Nothing here outlives the
request that created it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from app.core.constants import StepStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_ms(started_at: datetime, finished_at: datetime | None = None) -> int:
    return int(((finished_at or utcnow()) - started_at).total_seconds() * 1000)


@dataclass
class StepResult:
    """Timing and outcome of one step, as written to the pipeline log."""

    step_name: str
    status: StepStatus
    started_at: datetime
    completed_at: datetime
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def completed(cls, step_name: str, started_at: datetime, metadata: dict[str, Any] | None = None) -> StepResult:
        return cls(step_name, StepStatus.COMPLETED, started_at, utcnow(), metadata=metadata or {})

    @classmethod
    def failed(
        cls,
        step_name: str,
        started_at: datetime,
        exc: BaseException,
        metadata: dict[str, Any] | None = None,
    ) -> StepResult:
        return cls(
            step_name,
            StepStatus.FAILED,
            started_at,
            utcnow(),
            error=str(exc),
            metadata={"error_type": type(exc).__name__, **(metadata or {})},
        )

    @property
    def duration_ms(self) -> int:
        return elapsed_ms(self.started_at, self.completed_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_name": self.step_name,
            "status": self.status,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "metadata": self.metadata,
        }


@dataclass
class PipelineContext:
    """State for one booking as it moves through the pipeline."""

    fields: dict[str, str]
    execution_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    markup: str | None = None
    pdf_bytes: bytes | None = None
    public_url: str | None = None

    current_step_index: int = 0
    total_steps: int = 0
    step_results: list[StepResult] = field(default_factory=list)

    def require(self, attribute: str) -> Any:
        """Return an upstream step's output, failing loudly if it is missing."""
        value = getattr(self, attribute)
        if value is None:
            raise RuntimeError(f"'{attribute}' not set by an upstream step")
        return value

    @property
    def steps_completed(self) -> int:
        return sum(1 for r in self.step_results if r.status == StepStatus.COMPLETED)

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging."""
        return {
            "execution_id": self.execution_id,
            "markup_chars": len(self.markup) if self.markup is not None else None,
            "pdf_bytes": len(self.pdf_bytes) if self.pdf_bytes is not None else None,
            "public_url": self.public_url,
            "steps_completed": self.steps_completed,
            "total_steps": self.total_steps,
            "steps": [r.to_dict() for r in self.step_results],
        }

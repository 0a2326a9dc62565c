"""
PipelineStep — one stage of the render-and-publish pipeline.

A step reads the context attribute named by ``consumes``, stores its
output on the attribute named by ``produces`` and returns a small dict
of facts for the log.  Timing, result bookkeeping and error tagging
belong to the engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from app.pipeline.context import PipelineContext


class PipelineStep(ABC):
    """Base class for pipeline steps; never retried, never rolled back."""

    name: str = "unnamed_step"
    description: str = "No description"
    consumes: str = "fields"
    produces: str | None = None

    @abstractmethod
    async def execute(self, ctx: PipelineContext) -> dict[str, Any]:
        """Do the work and return log metadata.  Raise a PipelineError on failure."""

    def take(self, ctx: PipelineContext) -> Any:
        return ctx.require(self.consumes)

    def give(self, ctx: PipelineContext, value: Any) -> Any:
        setattr(ctx, self.produces, value)
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.consumes} -> {self.produces}>"

"""
PipelineEngine — runs the render-and-publish steps in order for one booking.

Every booking gets its own PipelineContext.  The first failing step stops
the run: known PipelineErrors are tagged with the execution id and step
name and re-raised, anything else is wrapped in StepExecutionError.
Nothing is retried or compensated; a failed upload leaves any stored
object in place, and a failed render has already released its browser.
"""

from __future__ import annotations

from collections.abc import Mapping

from app.core.constants import PipelineStatus
from app.core.logging import get_logger
from app.pipeline.context import PipelineContext, StepResult, elapsed_ms, utcnow
from app.pipeline.errors import PipelineError, StepExecutionError
from app.pipeline.step import PipelineStep


class PipelineEngine:
    """
    Usage::

        engine = PipelineEngine(steps=document_flow(renderer, documents, store))
        url = await engine.process({"restaurant_name": "Chez Luna", ...})
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self.steps = steps
        self.logger = get_logger("pipeline.engine")

    async def process(self, fields: Mapping[str, str]) -> str:
        """Render, publish, and return the public URL for one booking."""
        ctx = PipelineContext(fields=dict(fields))
        await self.run_steps(ctx)
        return ctx.require("public_url")

    async def run_steps(self, ctx: PipelineContext) -> PipelineContext:
        started_at = utcnow()
        ctx.total_steps = len(self.steps)
        log = self.logger.bind(execution_id=ctx.execution_id, total_steps=ctx.total_steps)
        log.info("Pipeline started")

        for index, step in enumerate(self.steps):
            ctx.current_step_index = index
            step_log = log.bind(step_name=step.name, step_index=index + 1)
            step_log.info(f"Step {index + 1}/{ctx.total_steps}: {step.description}")

            step_started_at = utcnow()
            try:
                metadata = await step.execute(ctx)
            except PipelineError as exc:
                exc.execution_id = exc.execution_id or ctx.execution_id
                exc.step_name = exc.step_name or step.name
                ctx.step_results.append(StepResult.failed(step.name, step_started_at, exc, exc.details))
                step_log.error(
                    "Step failed, pipeline stopping",
                    status=PipelineStatus.FAILED,
                    error_type=type(exc).__name__,
                    error=str(exc),
                    details=exc.details,
                    exc_info=True,
                )
                raise
            except Exception as exc:
                ctx.step_results.append(StepResult.failed(step.name, step_started_at, exc))
                step_log.exception("Unexpected error in step", status=PipelineStatus.FAILED, error=str(exc))
                raise StepExecutionError(
                    f"Step '{step.name}' failed unexpectedly: {exc}",
                    execution_id=ctx.execution_id,
                    step_name=step.name,
                ) from exc

            result = StepResult.completed(step.name, step_started_at, metadata)
            ctx.step_results.append(result)
            step_log.info("Step completed", duration_ms=result.duration_ms, metadata=result.metadata)

        log.info(
            "Pipeline finished",
            status=PipelineStatus.COMPLETED,
            duration_ms=elapsed_ms(started_at),
            summary=ctx.to_summary_dict(),
        )
        return ctx

"""
RenderPdfStep — renders ctx.markup to a one-page PDF in a fresh browser.

The bytes stay in memory; nothing touches disk.
"""

from __future__ import annotations

from app.pipeline.context import PipelineContext
from app.pipeline.step import PipelineStep
from app.processing.document_engine import DocumentEngine


class RenderPdfStep(PipelineStep):
    """Render markup to PDF bytes."""

    name = "render_pdf"
    description = "Render HTML to a single-page PDF"
    consumes = "markup"
    produces = "pdf_bytes"

    def __init__(self, engine: DocumentEngine) -> None:
        self.engine = engine

    async def execute(self, ctx: PipelineContext) -> dict:
        pdf = self.give(ctx, await self.engine.render(self.take(ctx)))
        return {"size_bytes": len(pdf), "page_format": self.engine.page_format}

"""
PublishPdfStep — uploads ctx.pdf_bytes and resolves the public URL.

A single attempt: on failure the object may already be in the bucket,
and it is left there.
"""

from __future__ import annotations

from app.core.constants import PDF_CONTENT_TYPE
from app.pipeline.context import PipelineContext
from app.pipeline.step import PipelineStep
from app.storage.object_store import ObjectStore


class PublishPdfStep(PipelineStep):
    """Store the PDF and derive its permanent public URL."""

    name = "publish_pdf"
    description = "Upload PDF to object storage and build the public URL"
    consumes = "pdf_bytes"
    produces = "public_url"

    def __init__(self, store: ObjectStore) -> None:
        self.store = store

    async def execute(self, ctx: PipelineContext) -> dict:
        url = await self.store.publish(self.take(ctx), PDF_CONTENT_TYPE)
        self.give(ctx, url)
        return {"bucket": self.store.bucket, "url": url}

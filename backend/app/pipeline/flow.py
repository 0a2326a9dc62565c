"""
Document flow — the fixed step sequence for one booking PDF.

    Merge fields into template → Render PDF → Publish to object store

There is a single flow; each step receives the component it drives as
an explicit dependency so tests can swap any of them for a double.
"""

from __future__ import annotations

from app.pipeline.engine import PipelineEngine
from app.pipeline.step import PipelineStep
from app.pipeline.steps.publish_pdf import PublishPdfStep
from app.pipeline.steps.render_pdf import RenderPdfStep
from app.pipeline.steps.render_template import RenderTemplateStep
from app.processing.document_engine import DocumentEngine
from app.processing.template_renderer import TemplateRenderer
from app.storage.object_store import ObjectStore


def document_flow(
    renderer: TemplateRenderer,
    documents: DocumentEngine,
    store: ObjectStore,
) -> list[PipelineStep]:
    return [
        RenderTemplateStep(renderer),
        RenderPdfStep(documents),
        PublishPdfStep(store),
    ]


def build_pipeline(
    renderer: TemplateRenderer,
    documents: DocumentEngine,
    store: ObjectStore,
) -> PipelineEngine:
    """Wire the three components into a ready-to-use PipelineEngine."""
    return PipelineEngine(steps=document_flow(renderer, documents, store))

"""
RenderTemplateStep — merges the booking fields into the HTML template.
"""

from __future__ import annotations

from app.pipeline.context import PipelineContext
from app.pipeline.step import PipelineStep
from app.processing.template_renderer import TemplateRenderer


class RenderTemplateStep(PipelineStep):
    """Substitute booking fields into the template."""

    name = "render_template"
    description = "Merge booking fields into the HTML template"
    consumes = "fields"
    produces = "markup"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def execute(self, ctx: PipelineContext) -> dict:
        markup = self.give(ctx, self.renderer.render(self.take(ctx)))
        return {
            "template": str(self.renderer.template_path),
            "policy": self.renderer.policy,
            "markup_chars": len(markup),
        }

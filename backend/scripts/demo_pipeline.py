#!/usr/bin/env python3
"""
Demo script — run the render-and-publish pipeline once, without the API.

Uses the same settings as the server (environment / .env), so MinIO must
be reachable and Chromium installed (``playwright install chromium``).

Usage:
    cd backend
    python -m scripts.demo_pipeline                 # built-in sample booking
    python -m scripts.demo_pipeline booking.json    # booking from a file
"""

import asyncio
import json
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SAMPLE_BOOKING = {
    "restaurant_name": "Chez Luna",
    "time": "19:00",
    "date": "2024-09-01",
    "address": "12 Rue",
    "email": "a@b.com",
}


async def run_booking(fields: dict[str, str]) -> None:
    from app.core.config import settings
    from app.pipeline.context import PipelineContext
    from app.pipeline.errors import PipelineError, PolicyError
    from app.pipeline.flow import build_pipeline
    from app.processing.document_engine import DocumentEngine, chromium_session
    from app.processing.template_renderer import TemplateRenderer
    from app.storage.object_store import ObjectStore

    store = ObjectStore.from_settings(settings)
    try:
        await store.ensure_public_bucket()
    except PolicyError as exc:
        print(f"  ⚠  Bucket provisioning failed: {exc}")

    engine = build_pipeline(
        TemplateRenderer(settings.TEMPLATE_PATH, settings.TEMPLATE_SUBSTITUTION_POLICY),
        DocumentEngine(
            chromium_session(settings.BROWSER_ARGS),
            page_format=settings.PDF_PAGE_FORMAT,
            margin=settings.PDF_MARGIN,
            wait_timeout_ms=settings.RENDER_WAIT_TIMEOUT_MS,
            deadline_seconds=settings.RENDER_DEADLINE_SECONDS,
        ),
        store,
    )

    ctx = PipelineContext(fields=fields)
    try:
        await engine.run_steps(ctx)
    except PipelineError as exc:
        print(f"\n  ✗ {type(exc).__name__} in {exc.step_name}: {exc}")
    _print_context(ctx)


def _print_context(ctx) -> None:
    """Pretty-print the per-step outcome of one run."""
    print(f"\n{'─' * 50}")
    print(f"  Execution ID : {ctx.execution_id[:12]}...")
    print(f"  Steps        : {ctx.steps_completed}/{ctx.total_steps} completed")

    print("\n  Step Results:")
    for sr in ctx.step_results:
        icon = "✓" if sr.status == "COMPLETED" else "✗"
        print(f"    {icon} {sr.step_name} ({sr.duration_ms}ms)")
        for k, v in sr.metadata.items():
            print(f"        {k}: {v}")
        if sr.error:
            print(f"        error: {sr.error}")

    if ctx.public_url:
        print(f"\n  Public URL   : {ctx.public_url}")
    print(f"{'─' * 50}\n")


async def main():
    from app.core.logging import setup_logging
    setup_logging("WARNING")     # quiet logs, show formatted output only

    fields = SAMPLE_BOOKING
    if len(sys.argv) > 1:
        with open(sys.argv[1], encoding="utf-8") as fh:
            fields = json.load(fh)

    print("\n╔" + "═" * 68 + "╗")
    print("║           SANGRIA FIESTA — RENDER & PUBLISH PIPELINE DEMO          ║")
    print("╚" + "═" * 68 + "╝")

    await run_booking(fields)


if __name__ == "__main__":
    asyncio.run(main())

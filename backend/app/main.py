"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.v1 import documents
from app.core.config import Settings, settings
from app.core.logging import get_logger, setup_logging
from app.pipeline.errors import PolicyError
from app.pipeline.flow import build_pipeline
from app.processing.document_engine import DocumentEngine, chromium_session
from app.processing.template_renderer import TemplateRenderer
from app.storage.object_store import ObjectStore

API_PREFIX = "/api/v1"


def create_app(
    config: Settings | None = None,
    *,
    store: ObjectStore | None = None,
    documents_engine: DocumentEngine | None = None,
    renderer: TemplateRenderer | None = None,
) -> FastAPI:
    """
    Build the application.

    Components not passed in are built from ``config``.  The bucket is
    provisioned inside the lifespan, so it is done before the first
    request is accepted.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle hooks."""
        is_dev = config.APP_ENV == "development"
        setup_logging("DEBUG" if is_dev else "INFO", json_logs=not is_dev)
        logger = get_logger("startup")
        logger.info("Application starting", env=config.APP_ENV)

        object_store = store or ObjectStore.from_settings(config)
        try:
            await object_store.ensure_public_bucket()
        except PolicyError as exc:
            # The bucket may already be provisioned out of band; keep serving.
            logger.error("Bucket provisioning failed", bucket=exc.bucket, error=str(exc))

        app.state.pipeline = build_pipeline(
            renderer or TemplateRenderer(config.TEMPLATE_PATH, config.TEMPLATE_SUBSTITUTION_POLICY),
            documents_engine or DocumentEngine(
                chromium_session(config.BROWSER_ARGS),
                page_format=config.PDF_PAGE_FORMAT,
                margin=config.PDF_MARGIN,
                wait_timeout_ms=config.RENDER_WAIT_TIMEOUT_MS,
                deadline_seconds=config.RENDER_DEADLINE_SECONDS,
            ),
            object_store,
        )
        logger.info("Application ready", bucket=object_store.bucket)
        yield
        logger.info("Application shutting down")

    app = FastAPI(
        title="Sangria Fiesta PDF API",
        description="Renders booking details to a branded PDF and publishes it",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(documents.router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Public health-check endpoint."""
        return {"status": "ok", "env": config.APP_ENV}

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on settings.PORT."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()

"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic import Field

from app.core.constants import SubstitutionPolicy

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "sangria_fiesta.html"


class Settings(BaseSettings):
    # ── Object Storage (MinIO, internal address) ──
    MINIO_ENDPOINT: str = "host.docker.internal"
    MINIO_PORT: int = 9000
    MINIO_USE_SSL: bool = False
    MINIO_ROOT_USER: str = "minioadmin"
    MINIO_ROOT_PASSWORD: str = "minioadmin"
    MINIO_BUCKET: str = "pdfs"
    MINIO_REGION: str = "us-east-1"

    # ── Public address clients fetch artifacts from ──
    PUBLIC_MINIO_DOMAIN: str = "localhost"

    @property
    def STORAGE_ENDPOINT_URL(self) -> str:
        """Internal endpoint URL handed to the S3 client."""
        scheme = "https" if self.MINIO_USE_SSL else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}:{self.MINIO_PORT}"

    # ── Artifacts ─────────────────────────────
    ARTIFACT_KEY_PREFIX: str = "sangria-fiesta"
    PRESIGNED_URL_EXPIRY_SECONDS: int = Field(default=7 * 24 * 60 * 60, ge=1)

    # ── Template ──────────────────────────────
    TEMPLATE_PATH: Path = DEFAULT_TEMPLATE_PATH
    TEMPLATE_SUBSTITUTION_POLICY: SubstitutionPolicy = SubstitutionPolicy.TRUST

    # ── PDF rendering ─────────────────────────
    PDF_PAGE_FORMAT: str = "A4"
    PDF_MARGIN: str = "20px"
    RENDER_WAIT_TIMEOUT_MS: float = Field(default=30_000, gt=0)
    RENDER_DEADLINE_SECONDS: float | None = None
    BROWSER_ARGS: list[str] = ["--no-sandbox", "--disable-setuid-sandbox"]

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    PORT: int = 3000

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()

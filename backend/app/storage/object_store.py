"""
ObjectStore — publishes rendered documents to one S3-compatible bucket.

The bucket is made publicly readable once, when it is first created.
Because anonymous GetObject is granted bucket-wide, the signature on a
presigned URL is not needed to fetch the object: stripping it and
pointing the URL at the public host yields a link that never expires.

boto3 is synchronous; every client call runs in a worker thread so a
request waiting on the store does not hold up the event loop.
"""

from __future__ import annotations

import asyncio
import json
import mimetypes
import uuid
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings
from app.core.constants import PDF_CONTENT_TYPE
from app.core.logging import get_logger
from app.pipeline.errors import PolicyError, UploadError

logger = get_logger(__name__)

# head_bucket reports a missing bucket with a bare status code
_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


@dataclass(frozen=True)
class StoredArtifact:
    """Where one published document lives in the store."""

    key: str
    bucket: str
    content_type: str = PDF_CONTENT_TYPE


def public_read_policy(bucket: str) -> dict[str, Any]:
    """Bucket policy granting anonymous GetObject on every key."""
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": "*",
                "Action": ["s3:GetObject"],
                "Resource": [f"arn:aws:s3:::{bucket}/*"],
            }
        ],
    }


def derive_public_url(signed_url: str, public_host: str) -> str:
    """
    Turn a presigned internal URL into the permanent public one.

    Drops the query (signature) and fragment, swaps the internal
    host:port for ``public_host`` and forces https.
    """
    parts = urlsplit(signed_url)
    return urlunsplit(("https", public_host, parts.path, "", ""))


def build_s3_client(settings: Settings):
    """S3 client for the internal MinIO endpoint (path-style, SigV4)."""
    return boto3.client(
        "s3",
        endpoint_url=settings.STORAGE_ENDPOINT_URL,
        aws_access_key_id=settings.MINIO_ROOT_USER,
        aws_secret_access_key=settings.MINIO_ROOT_PASSWORD,
        region_name=settings.MINIO_REGION,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


class ObjectStore:
    """Owns one bucket: provisions it and publishes blobs into it."""

    def __init__(
        self,
        client,
        *,
        bucket: str,
        public_host: str,
        key_prefix: str = "sangria-fiesta",
        url_expiry_seconds: int = 7 * 24 * 60 * 60,
        region: str | None = None,
    ) -> None:
        self._client = client
        self.bucket = bucket
        self.public_host = public_host
        self.key_prefix = key_prefix
        self.url_expiry_seconds = url_expiry_seconds
        self.region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> ObjectStore:
        return cls(
            build_s3_client(settings),
            bucket=settings.MINIO_BUCKET,
            public_host=settings.PUBLIC_MINIO_DOMAIN,
            key_prefix=settings.ARTIFACT_KEY_PREFIX,
            url_expiry_seconds=settings.PRESIGNED_URL_EXPIRY_SECONDS,
            region=settings.MINIO_REGION,
        )

    # ─── Provisioning ──────────────────────────────────

    async def ensure_public_bucket(self) -> None:
        """
        Create the bucket with a public-read policy if it does not exist.

        An existing bucket is left untouched, policy included.
        Raises PolicyError on any store failure.
        """
        try:
            if await asyncio.to_thread(self._bucket_exists):
                logger.info("Bucket already exists", bucket=self.bucket)
                return

            await asyncio.to_thread(self._create_bucket)
            await asyncio.to_thread(
                self._client.put_bucket_policy,
                Bucket=self.bucket,
                Policy=json.dumps(public_read_policy(self.bucket)),
            )
        except (BotoCoreError, ClientError) as exc:
            raise PolicyError(
                f"Could not provision public bucket '{self.bucket}': {exc}",
                bucket=self.bucket,
            ) from exc

        logger.info("Bucket created and made publicly readable", bucket=self.bucket)

    def _bucket_exists(self) -> bool:
        try:
            self._client.head_bucket(Bucket=self.bucket)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_BUCKET_CODES:
                return False
            raise
        return True

    def _create_bucket(self) -> None:
        if self.region and self.region != "us-east-1":
            self._client.create_bucket(
                Bucket=self.bucket,
                CreateBucketConfiguration={"LocationConstraint": self.region},
            )
        else:
            self._client.create_bucket(Bucket=self.bucket)

    # ─── Publishing ────────────────────────────────────

    def new_artifact(self, content_type: str = PDF_CONTENT_TYPE) -> StoredArtifact:
        """Allocate a fresh, never-reused key under the artifact prefix."""
        extension = mimetypes.guess_extension(content_type) or ""
        return StoredArtifact(
            key=f"{self.key_prefix}-{uuid.uuid4()}{extension}",
            bucket=self.bucket,
            content_type=content_type,
        )

    async def publish(self, data: bytes, content_type: str = PDF_CONTENT_TYPE) -> str:
        """Store ``data`` under a new key and return its permanent public URL."""
        artifact = self.new_artifact(content_type)

        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=artifact.bucket,
                Key=artifact.key,
                Body=data,
                ContentType=artifact.content_type,
            )
            signed_url = await asyncio.to_thread(
                self._client.generate_presigned_url,
                ClientMethod="get_object",
                Params={"Bucket": artifact.bucket, "Key": artifact.key},
                ExpiresIn=self.url_expiry_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(
                f"Upload of '{artifact.key}' failed: {exc}",
                bucket=artifact.bucket,
                key=artifact.key,
            ) from exc

        public_url = derive_public_url(signed_url, self.public_host)
        logger.info(
            "Artifact published",
            bucket=artifact.bucket,
            key=artifact.key,
            size_bytes=len(data),
            url=public_url,
        )
        return public_url

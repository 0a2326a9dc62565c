"""Pytest configuration and shared test doubles."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from urllib.parse import urlsplit

import pytest
from botocore.exceptions import ClientError

pytest_plugins = ("pytest_asyncio",)

FAKE_PDF = b"%PDF-1.7\n% fake single page\n%%EOF"

INTERNAL_ENDPOINT = "http://minio.internal:9000"
PUBLIC_HOST = "files.example.com"


# ═══════════════════════════════════════════════════════════
#  Object store double
# ═══════════════════════════════════════════════════════════

class InMemoryS3Client:
    """
    Minimal stand-in for a boto3 S3 client.

    Implements just the calls ObjectStore makes, keeps objects in a dict,
    and can serve a public URL back the way an anonymous GET would.
    """

    def __init__(self, endpoint: str = INTERNAL_ENDPOINT) -> None:
        self.endpoint = endpoint
        self.buckets: dict[str, dict[str, tuple[bytes, str]]] = {}
        self.policies: dict[str, str] = {}
        self.calls: list[str] = []

    def head_bucket(self, Bucket):
        self.calls.append("head_bucket")
        if Bucket not in self.buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")
        return {}

    def create_bucket(self, Bucket, **kwargs):
        self.calls.append("create_bucket")
        self.buckets[Bucket] = {}
        return {"Location": f"/{Bucket}"}

    def put_bucket_policy(self, Bucket, Policy):
        self.calls.append("put_bucket_policy")
        self.policies[Bucket] = Policy
        return {}

    def put_object(self, Bucket, Key, Body, ContentType):
        self.calls.append("put_object")
        if Bucket not in self.buckets:
            raise ClientError({"Error": {"Code": "NoSuchBucket", "Message": "missing"}}, "PutObject")
        self.buckets[Bucket][Key] = (bytes(Body), ContentType)
        return {"ETag": '"0"'}

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        self.calls.append("generate_presigned_url")
        return (
            f"{self.endpoint}/{Params['Bucket']}/{Params['Key']}"
            f"?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Expires={ExpiresIn}"
            "&X-Amz-Signature=deadbeef"
        )

    def fetch_public(self, url: str) -> tuple[bytes, str]:
        """Anonymous GET: only works for buckets carrying a policy."""
        bucket, key = urlsplit(url).path.lstrip("/").split("/", 1)
        if bucket not in self.policies:
            raise PermissionError(f"bucket {bucket} is not public")
        return self.buckets[bucket][key]


@pytest.fixture
def s3_client():
    return InMemoryS3Client()


# ═══════════════════════════════════════════════════════════
#  Rendering session doubles
# ═══════════════════════════════════════════════════════════

class FakePage:
    """Records what the engine asked for and returns canned PDF bytes."""

    def __init__(self, *, load_error=None, export_error=None, load_delay=0.0, pdf=FAKE_PDF):
        self.load_error = load_error
        self.export_error = export_error
        self.load_delay = load_delay
        self.pdf_bytes = pdf
        self.content = None
        self.set_content_kwargs = {}
        self.selectors: list[str] = []
        self.pdf_kwargs = None

    async def set_content(self, html, **kwargs):
        self.content = html
        self.set_content_kwargs = kwargs
        if self.load_delay:
            await asyncio.sleep(self.load_delay)
        if self.load_error is not None:
            raise self.load_error

    async def wait_for_selector(self, selector, **kwargs):
        self.selectors.append(selector)

    async def pdf(self, **kwargs):
        self.pdf_kwargs = kwargs
        if self.export_error is not None:
            raise self.export_error
        return self.pdf_bytes


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.pages_opened = 0
        self.closed = False

    async def new_page(self):
        self.pages_opened += 1
        return self.page

    async def close(self):
        self.closed = True


class FakeSessionFactory:
    """Session factory handing out one fresh FakeBrowser per render."""

    def __init__(self, page_factory=FakePage) -> None:
        self.page_factory = page_factory
        self.browsers: list[FakeBrowser] = []

    def __call__(self):
        browser = FakeBrowser(self.page_factory())
        self.browsers.append(browser)
        return self._session(browser)

    @asynccontextmanager
    async def _session(self, browser):
        try:
            yield browser
        finally:
            await browser.close()


@pytest.fixture
def session_factory():
    return FakeSessionFactory()


# ═══════════════════════════════════════════════════════════
#  Booking data
# ═══════════════════════════════════════════════════════════

@pytest.fixture
def booking_fields():
    return {
        "restaurant_name": "Chez Luna",
        "time": "19:00",
        "date": "2024-09-01",
        "address": "12 Rue",
        "email": "a@b.com",
    }


@pytest.fixture
def template_file(tmp_path):
    """A small template using every placeholder, some more than once."""
    path = tmp_path / "booking.html"
    path.write_text(
        "<html><body>"
        "<h1>{{restaurant_name}}</h1>"
        "<p>{{date}} at {{time}}</p>"
        "<p>{{address}}</p>"
        "<p>Contact {{email}} or visit {{restaurant_name}}</p>"
        "<footer>{{unknown_field}}</footer>"
        "</body></html>",
        encoding="utf-8",
    )
    return path

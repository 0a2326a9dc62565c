"""Unit tests for DocumentEngine and the Chromium session lifecycle."""

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.pipeline.errors import ExportError, RenderError
from app.processing import document_engine
from app.processing.document_engine import DocumentEngine, chromium_session
from conftest import FAKE_PDF, FakeBrowser, FakePage, FakeSessionFactory


class FakePlaywright:
    """Stands in for the object yielded by ``async_playwright()``."""

    def __init__(self, browser=None, launch_error=None) -> None:
        self.browser = browser
        self.launch_error = launch_error
        self.launch_kwargs = None
        self.stopped = False
        self.chromium = self

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        if self.launch_error is not None:
            raise self.launch_error
        return self.browser

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.stopped = True
        return False


@pytest.fixture
def patch_playwright(monkeypatch):
    """Route chromium_session() to a FakePlaywright wrapping ``page``."""

    def _patch(page=None, launch_error=None):
        fake = FakePlaywright(FakeBrowser(page or FakePage()), launch_error=launch_error)
        monkeypatch.setattr(document_engine, "async_playwright", lambda: fake)
        return fake

    return _patch


class TestRender:
    """Tests for the happy path."""

    @pytest.mark.asyncio
    async def test_returns_pdf_bytes(self, session_factory):
        engine = DocumentEngine(session_factory)

        pdf = await engine.render("<html><body>hi</body></html>")

        assert pdf == FAKE_PDF
        assert isinstance(pdf, bytes)

    @pytest.mark.asyncio
    async def test_waits_for_network_idle_then_body(self, session_factory):
        engine = DocumentEngine(session_factory, wait_timeout_ms=1234)

        await engine.render("<html><body>hi</body></html>")

        page = session_factory.browsers[0].page
        assert page.content == "<html><body>hi</body></html>"
        assert page.set_content_kwargs == {"wait_until": "networkidle", "timeout": 1234}
        assert page.selectors == ["body"]

    @pytest.mark.asyncio
    async def test_exports_first_page_only_with_fixed_layout(self, session_factory):
        engine = DocumentEngine(session_factory, page_format="A4", margin="20px")

        await engine.render("<html><body>hi</body></html>")

        options = session_factory.browsers[0].page.pdf_kwargs
        assert options["format"] == "A4"
        assert options["print_background"] is True
        assert options["page_ranges"] == "1"
        assert options["margin"] == {"top": "20px", "right": "20px", "bottom": "20px", "left": "20px"}

    @pytest.mark.asyncio
    async def test_each_render_gets_its_own_session(self, session_factory):
        engine = DocumentEngine(session_factory)

        await asyncio.gather(engine.render("<p>a</p>"), engine.render("<p>b</p>"))

        assert len(session_factory.browsers) == 2
        assert all(b.closed for b in session_factory.browsers)
        assert all(b.pages_opened == 1 for b in session_factory.browsers)


class TestFailures:
    """Tests for error classification and guaranteed session release."""

    @pytest.mark.asyncio
    async def test_load_timeout_is_render_error_and_session_released(self):
        factory = FakeSessionFactory(
            lambda: FakePage(load_error=PlaywrightTimeoutError("Timeout 30000ms exceeded."))
        )
        engine = DocumentEngine(factory)

        with pytest.raises(RenderError):
            await engine.render("<p>x</p>")

        assert factory.browsers[0].closed is True
        assert factory.browsers[0].page.pdf_kwargs is None

    @pytest.mark.asyncio
    async def test_export_failure_is_export_error_and_session_released(self):
        factory = FakeSessionFactory(
            lambda: FakePage(export_error=PlaywrightError("Printing failed"))
        )
        engine = DocumentEngine(factory)

        with pytest.raises(ExportError):
            await engine.render("<p>x</p>")

        assert factory.browsers[0].closed is True

    @pytest.mark.asyncio
    async def test_deadline_cancels_render_and_releases_session(self):
        factory = FakeSessionFactory(lambda: FakePage(load_delay=5))
        engine = DocumentEngine(factory, deadline_seconds=0.05)

        with pytest.raises(RenderError) as exc_info:
            await engine.render("<p>x</p>")

        assert exc_info.value.details == {"deadline_seconds": 0.05}
        assert factory.browsers[0].closed is True

    @pytest.mark.asyncio
    async def test_no_deadline_by_default(self, session_factory):
        engine = DocumentEngine(session_factory)

        assert engine.deadline_seconds is None
        assert await engine.render("<p>x</p>") == FAKE_PDF


class TestChromiumSession:
    """Tests for the real session factory against a fake Playwright driver."""

    @pytest.mark.asyncio
    async def test_launches_headless_with_args(self, patch_playwright):
        fake = patch_playwright()
        engine = DocumentEngine(chromium_session(["--no-sandbox"]))

        await engine.render("<p>x</p>")

        assert fake.launch_kwargs == {"headless": True, "args": ["--no-sandbox"]}
        assert fake.browser.closed is True
        assert fake.stopped is True

    @pytest.mark.asyncio
    async def test_browser_closed_when_load_times_out(self, patch_playwright):
        fake = patch_playwright(FakePage(load_error=PlaywrightTimeoutError("Timeout")))
        engine = DocumentEngine(chromium_session())

        with pytest.raises(RenderError):
            await engine.render("<p>x</p>")

        assert fake.browser.closed is True
        assert fake.stopped is True

    @pytest.mark.asyncio
    async def test_browser_closed_when_export_fails(self, patch_playwright):
        fake = patch_playwright(FakePage(export_error=PlaywrightError("boom")))
        engine = DocumentEngine(chromium_session())

        with pytest.raises(ExportError):
            await engine.render("<p>x</p>")

        assert fake.browser.closed is True

    @pytest.mark.asyncio
    async def test_launch_failure_is_render_error(self, patch_playwright):
        fake = patch_playwright(launch_error=PlaywrightError("Executable doesn't exist"))
        engine = DocumentEngine(chromium_session())

        with pytest.raises(RenderError):
            await engine.render("<p>x</p>")

        assert fake.browser.closed is False
        assert fake.stopped is True

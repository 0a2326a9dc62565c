"""
DocumentEngine — renders HTML markup to PDF bytes in headless Chromium.

Every render gets its own browser.  The browser is acquired and released
by one async context manager (``_chromium_session``), so it is closed on
success, on load failure, on export failure and on cancellation alike.

Only page 1 is exported: the template is designed to fit one A4 page and
anything overflowing it is dropped on purpose.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from playwright.async_api import Browser, async_playwright
from playwright.async_api import Error as PlaywrightError

from app.core.logging import get_logger
from app.pipeline.errors import ExportError, RenderError

logger = get_logger(__name__)

DEFAULT_BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

SessionFactory = Callable[[], AbstractAsyncContextManager[Browser]]


def chromium_session(args: list[str] | None = None) -> SessionFactory:
    """Build a factory that launches a fresh headless Chromium per call."""
    launch_args = list(args if args is not None else DEFAULT_BROWSER_ARGS)

    @asynccontextmanager
    async def _chromium_session() -> AsyncIterator[Browser]:
        async with async_playwright() as playwright:
            try:
                browser = await playwright.chromium.launch(headless=True, args=launch_args)
            except PlaywrightError as exc:
                raise RenderError(f"Could not launch rendering session: {exc}") from exc
            try:
                yield browser
            finally:
                await browser.close()

    return _chromium_session


class DocumentEngine:
    """
    Turns one markup document into one PDF byte string.

    Args:
        session_factory: Zero-arg callable returning an async context
            manager that yields a Browser and closes it on exit.
        page_format: Physical page size passed to Chromium (e.g. "A4").
        margin: CSS length applied to all four page margins.
        wait_timeout_ms: Timeout for the network-idle and body waits.
        deadline_seconds: Optional cap on one whole render.  ``None``
            means no deadline beyond the per-wait timeouts.
    """

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        page_format: str = "A4",
        margin: str = "20px",
        wait_timeout_ms: float = 30_000,
        deadline_seconds: float | None = None,
    ) -> None:
        self.session_factory = session_factory or chromium_session()
        self.page_format = page_format
        self.margin = margin
        self.wait_timeout_ms = wait_timeout_ms
        self.deadline_seconds = deadline_seconds

    @property
    def pdf_options(self) -> dict[str, Any]:
        return {
            "format": self.page_format,
            "print_background": True,
            "margin": {
                "top": self.margin,
                "right": self.margin,
                "bottom": self.margin,
                "left": self.margin,
            },
            "page_ranges": "1",
        }

    async def render(self, markup: str) -> bytes:
        """Render ``markup`` and return the first page as PDF bytes."""
        if self.deadline_seconds is None:
            return await self._render(markup)

        try:
            return await asyncio.wait_for(self._render(markup), timeout=self.deadline_seconds)
        except asyncio.TimeoutError as exc:
            raise RenderError(
                f"Render exceeded deadline of {self.deadline_seconds}s",
                details={"deadline_seconds": self.deadline_seconds},
            ) from exc

    async def _render(self, markup: str) -> bytes:
        async with self.session_factory() as browser:
            try:
                page = await browser.new_page()
                await page.set_content(
                    markup,
                    wait_until="networkidle",
                    timeout=self.wait_timeout_ms,
                )
                await page.wait_for_selector("body", timeout=self.wait_timeout_ms)
            except PlaywrightError as exc:
                raise RenderError(f"Markup did not finish loading: {exc}") from exc

            try:
                pdf = await page.pdf(**self.pdf_options)
            except PlaywrightError as exc:
                raise ExportError(f"PDF export failed: {exc}") from exc

        logger.debug("PDF rendered", size_bytes=len(pdf), page_format=self.page_format)
        return bytes(pdf)

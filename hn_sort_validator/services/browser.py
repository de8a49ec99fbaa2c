from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from ..exceptions import LifecycleFatalError


logger = logging.getLogger(__name__)


class BrowserSession:
    """Long-lived Playwright browser and context owned by the run lifecycle.

    Every lifecycle phase opens its own page through ``new_view()`` and closes
    it when the phase ends; the session itself is closed once at shutdown.
    """

    def __init__(self, headless: bool = False, channel: Optional[str] = None):
        self.headless = headless
        self.channel = channel
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def start(self) -> None:
        logger.info(f"Launching browser (headless={self.headless})...")
        launch_kwargs: Dict[str, Any] = {"headless": self.headless}
        if self.channel:
            launch_kwargs["channel"] = self.channel
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(**launch_kwargs)
            self._context = await self._browser.new_context()
        except Exception as exc:
            await self.close()
            raise LifecycleFatalError(f"Could not start browser session: {exc}") from exc

    async def new_view(self) -> Page:
        if self._context is None:
            raise LifecycleFatalError("Browser session is not started")
        return await self._context.new_page()

    async def close(self) -> None:
        """Release the browser; safe to call more than once."""
        context, browser, playwright = self._context, self._browser, self._playwright
        self._context = self._browser = self._playwright = None

        if context is not None:
            try:
                await context.close()
            except Exception as exc:  # noqa: BLE001
                logger.debug(f"Context close failed: {exc}")
        if browser is not None:
            try:
                await browser.close()
            except Exception as exc:  # noqa: BLE001
                logger.debug(f"Browser close failed: {exc}")
        if playwright is not None:
            await playwright.stop()


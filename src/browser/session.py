"""Playwright browser session management"""

import os
from typing import Optional

from loguru import logger
from playwright.async_api import async_playwright, Browser, BrowserContext, Page


class PortalBrowser:
    """Owns the single Playwright browser/context/page used for a run.

    The page handle is exclusive to the driver. close_browser() is safe to call
    on every exit path and only tears the session down once.
    """

    def __init__(self, headless: Optional[bool] = None, slow_mo: int = 500):
        """
        Args:
            headless: Headless mode. If None, reads HEADLESS env var (default: False)
            slow_mo: Delay in ms Playwright inserts between operations
        """
        if headless is None:
            headless = os.getenv('HEADLESS', 'false').lower() in ('true', '1', 'yes')
        self.headless = headless
        self.slow_mo = slow_mo

        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._playwright = None

    async def start_browser(self) -> Page:
        """Launch Chromium and open a fresh page"""
        self._playwright = await async_playwright().start()
        self.browser = await self._playwright.chromium.launch(
            headless=self.headless,
            slow_mo=self.slow_mo,
        )
        self.context = await self.browser.new_context()
        self.page = await self.context.new_page()

        mode = "headless" if self.headless else "headed"
        logger.info(f"Browser started in {mode} mode (slow_mo={self.slow_mo}ms)")
        return self.page

    @property
    def is_open(self) -> bool:
        return self._playwright is not None

    async def close_browser(self):
        """Close browser"""
        if not self.is_open:
            return

        try:
            if self.context:
                await self.context.close()

            if self.browser:
                await self.browser.close()

            await self._playwright.stop()
            logger.info("Browser closed")
        except Exception as e:
            logger.debug(f"Error closing browser: {e}")
        finally:
            self.page = None
            self.context = None
            self.browser = None
            self._playwright = None

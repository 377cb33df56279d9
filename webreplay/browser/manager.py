from typing import Optional
from playwright.async_api import async_playwright, Page
from webreplay.core.logging import log
from webreplay.core.constants import DEFAULT_VIEWPORT
from webreplay.core.errors import BrowserNotStartedError

class BrowserManager:
    """
    Owns the Playwright browser for a record or replay run.
    Replays always get a page of their own through new_page().
    """
    def __init__(self, headless: bool = False):
        self.headless = headless
        self.playwright = None
        self.browser = None
        self.context = None

    async def start(self) -> None:
        """Start the browser session."""
        self.playwright = await async_playwright().start()

        launch_args = {"headless": self.headless}
        if not self.headless:
            launch_args["args"] = ["--start-maximized"]

        self.browser = await self.playwright.chromium.launch(**launch_args)
        # Headed windows size the viewport themselves
        viewport = DEFAULT_VIEWPORT if self.headless else None
        self.context = await self.browser.new_context(viewport=viewport, no_viewport=not self.headless)
        log(f"Browser started ({'headless' if self.headless else 'headed'})", level="debug")

    async def new_page(self) -> Page:
        if not self.context:
            raise BrowserNotStartedError("Browser not started")
        return await self.context.new_page()

    async def close(self) -> None:
        """Close the browser session."""
        if self.context:
            await self.context.close()
        if self.browser:
            await self.browser.close()
        if self.playwright:
            await self.playwright.stop()
        self.context = None
        self.browser = None
        self.playwright = None

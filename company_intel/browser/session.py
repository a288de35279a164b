"""Per-request Playwright browser session."""
import logging
from typing import Optional

from playwright.async_api import async_playwright

from company_intel.browser.page import RegistryPage
from company_intel.config import config
from company_intel.llm.client import LLMClient

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class BrowserSession:
    """Async context manager owning Playwright, Chromium, one context and one page."""

    def __init__(self, llm: Optional[LLMClient] = None, headless: Optional[bool] = None):
        self.llm = llm
        self.headless = config.HEADLESS if headless is None else headless
        self._playwright = None
        self._browser = None
        self._context = None
        self.page: Optional[RegistryPage] = None

    async def __aenter__(self) -> RegistryPage:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            self._context = await self._browser.new_context(user_agent=USER_AGENT, locale="en-GB")
            self._context.set_default_timeout(config.NAV_TIMEOUT * 1000)
            raw_page = await self._context.new_page()
        except Exception:
            await self.close()
            raise
        self.page = RegistryPage(raw_page, self.llm)
        logger.info(f"Browser session started (headless={self.headless})")
        return self.page

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser session closed")

"""Page handle combining a Playwright page with LLM-driven actions and extraction."""
import asyncio
import logging
import re
from typing import Any, Optional, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from pydantic import BaseModel

from company_intel.config import config
from company_intel.errors import LLMError, NavigationError
from company_intel.parse.html_parser import strip_for_llm

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

INDEX_ATTR = "data-ci-idx"
MAX_ACTION_ELEMENTS = 150

# Tags visible interactive elements and returns a short description of each
TAG_ELEMENTS_JS = """
(maxElements) => {
  const nodes = Array.from(document.querySelectorAll(
    'a, button, [role=button], input, select, textarea'
  ));
  const out = [];
  for (const el of nodes) {
    const rect = el.getBoundingClientRect();
    if (rect.width === 0 && rect.height === 0) continue;
    const index = out.length;
    el.setAttribute('%s', String(index));
    out.push({
      index,
      tag: el.tagName.toLowerCase(),
      text: (el.innerText || el.value || el.getAttribute('aria-label') || '').trim().slice(0, 80),
      hint: el.getAttribute('href') || el.getAttribute('name') || el.getAttribute('placeholder') || '',
    });
    if (out.length >= maxElements) break;
  }
  return out;
}
""" % INDEX_ATTR

COMPLEXITY_JS = """
() => ({
  tables: document.querySelectorAll('table').length,
  links: document.querySelectorAll('a').length,
  forms: document.querySelectorAll('form').length,
})
"""

def settle_delay_ms(
    tables: int,
    links: int,
    forms: int,
    min_delay: Optional[int] = None,
    max_delay: Optional[int] = None,
) -> int:
    """Post-navigation wait scaled by DOM complexity."""
    low = config.MIN_SETTLE_MS if min_delay is None else min_delay
    high = config.MAX_SETTLE_MS if max_delay is None else max_delay
    complexity = 1000 + tables * 300 + links * 5 + forms * 200
    return max(low, min(high, complexity))


class RegistryPage:
    """The one browser page a scrape request works against."""

    def __init__(self, page: Page, llm: Any = None):
        self.page = page
        self.llm = llm

    @property
    def url(self) -> str:
        return self.page.url

    async def goto(self, url: str) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=config.NAV_TIMEOUT * 1000)
        except (PlaywrightTimeoutError, PlaywrightError) as e:
            raise NavigationError(f"Failed to load {url}: {e}") from e

    async def title(self) -> str:
        return await self.page.title()

    async def content(self) -> str:
        return await self.page.content()

    async def wait_for_load(self, min_delay_ms: Optional[int] = None) -> None:
        try:
            await self.page.wait_for_load_state("domcontentloaded")
            counts = await self.page.evaluate(COMPLEXITY_JS)
        except (PlaywrightTimeoutError, PlaywrightError) as e:
            logger.warning(f"Load wait interrupted: {e}")
            return
        delay = settle_delay_ms(counts["tables"], counts["links"], counts["forms"], min_delay=min_delay_ms)
        logger.debug(f"Settling {delay}ms for {counts}")
        await asyncio.sleep(delay / 1000)

    async def click_selector(self, selector: str) -> bool:
        """Click the first visible match; False when nothing matched."""
        locator = self.page.locator(selector).first
        try:
            if await locator.count() == 0 or not await locator.is_visible():
                return False
            await locator.click()
        except (PlaywrightTimeoutError, PlaywrightError) as e:
            logger.debug(f"Click on {selector} failed: {e}")
            return False
        return True

    async def click_text(self, text: str) -> bool:
        """Click the first visible link or button whose name contains text (case-insensitive).

        Goes through ``locator.click()`` so a navigation started by the click
        is awaited before the caller reads the URL.
        """
        name = re.compile(re.escape(text), re.IGNORECASE)
        for role in ("link", "button"):
            try:
                for locator in await self.page.get_by_role(role, name=name).all():
                    if not await locator.is_visible():
                        continue
                    await locator.click()
                    return True
            except (PlaywrightTimeoutError, PlaywrightError) as e:
                logger.debug(f"Click on {role} {text!r} failed: {e}")
                return False
        return False

    async def fill(self, selector: str, value: str) -> bool:
        locator = self.page.locator(selector).first
        try:
            if await locator.count() == 0:
                return False
            await locator.fill(value)
        except (PlaywrightTimeoutError, PlaywrightError) as e:
            logger.debug(f"Fill on {selector} failed: {e}")
            return False
        return True

    async def press(self, selector: str, key: str) -> None:
        await self.page.locator(selector).first.press(key)

    async def act(self, instruction: str) -> bool:
        """Let the LLM pick an element for a natural-language instruction and perform it."""
        if self.llm is None:
            raise LLMError("No LLM client configured for page actions")
        try:
            elements = await self.page.evaluate(TAG_ELEMENTS_JS, MAX_ACTION_ELEMENTS)
        except PlaywrightError as e:
            raise NavigationError(f"Could not inspect page elements: {e}") from e
        if not elements:
            return False

        choice = await self.llm.choose_action(instruction, elements)
        if choice.action == "none" or choice.index is None:
            logger.info(f"LLM found no element for: {instruction}")
            return False

        selector = f"[{INDEX_ATTR}='{choice.index}']"
        if choice.action == "fill":
            filled = await self.fill(selector, choice.value or "")
            if filled:
                await self.press(selector, "Enter")
            return filled
        return await self.click_selector(selector)

    async def extract(self, instruction: str, schema_cls: type[SchemaT], html: Optional[str] = None) -> SchemaT:
        """Structured LLM extraction over the page (or a given HTML fragment)."""
        if self.llm is None:
            raise LLMError("No LLM client configured for extraction")
        source = html if html is not None else strip_for_llm(await self.content())
        return await self.llm.extract_structured(instruction, source, schema_cls)

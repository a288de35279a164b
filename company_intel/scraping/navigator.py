"""Moves the page to a named company section."""
import logging
import re
from urllib.parse import urlsplit, urlunsplit

from company_intel.errors import NavigationError
from company_intel.scraping.strategies import run_strategies

logger = logging.getLogger(__name__)

SECTION_PATHS = {
    "filing history": "/filing-history",
    "people": "/officers",
    "officers": "/officers",
    "charges": "/charges",
    "more": "/more",
}

TRAILING_SECTION = re.compile(r"/(filing-history|officers|people|charges|more)/?$")


def section_url(current_url: str, section: str) -> str | None:
    """Company base URL plus the fixed path of a section; None for unknown sections."""
    path = SECTION_PATHS.get(section.lower())
    if path is None:
        return None
    parts = urlsplit(current_url)
    base_path = TRAILING_SECTION.sub("", parts.path).rstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, base_path + path, "", ""))


def is_on_section(url: str, title: str, section: str) -> bool:
    needle = section.lower()
    return needle.replace(" ", "-") in (url or "").lower() or needle in (title or "").lower()


class Navigator:
    """Section navigation over a borrowed page handle."""

    def __init__(self, page):
        self.page = page

    async def _verify(self, section: str) -> bool:
        await self.page.wait_for_load()
        return is_on_section(self.page.url, await self.page.title(), section)

    async def _via_action(self, section: str) -> bool:
        await self.page.act(f'Click on the link or tab that contains "{section}"')
        return await self._verify(section)

    async def _via_url(self, section: str, from_url: str) -> bool:
        target = section_url(from_url, section)
        if target is None:
            logger.debug(f"No direct path for section {section!r}")
            return False
        await self.page.goto(target)
        return await self._verify(section)

    async def _via_text(self, section: str) -> bool:
        if not await self.page.click_text(section):
            return False
        return await self._verify(section)

    async def navigate_to_section(self, section: str) -> bool:
        """Navigate to section or raise NavigationError."""
        logger.info(f"Navigating to {section} section")
        from_url = self.page.url
        name, _ = await run_strategies(
            [
                ("action", lambda: self._via_action(section)),
                ("direct-url", lambda: self._via_url(section, from_url)),
                ("link-text", lambda: self._via_text(section)),
            ],
            accept=bool,
            label=f"Navigate[{section}]",
        )
        if name is None:
            raise NavigationError(f"Failed to navigate to {section} section")
        return True

"""Walks numbered result pages for filings and officers."""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from company_intel.parse.pagination import (
    build_page_url,
    detect_current_page,
    detect_total_pages,
    page_control_selectors,
)

logger = logging.getLogger(__name__)


@dataclass
class PaginatedRecords:
    records: list[Any] = field(default_factory=list)
    pages_scraped: int = 0


class Paginator:
    """Drives a borrowed page through numbered pages, extracting each."""

    def __init__(self, page):
        self.page = page

    async def _go_to_page(self, page_number: int) -> None:
        for selector in page_control_selectors(page_number):
            if await self.page.click_selector(selector):
                logger.debug(f"Clicked page control {selector}")
                await self.page.wait_for_load()
                return
        await self.page.goto(build_page_url(self.page.url, page_number))
        await self.page.wait_for_load()

    async def extract_all_pages(
        self,
        extract: Callable[[], Awaitable[list[Any]]],
        max_pages: int,
    ) -> PaginatedRecords:
        """Extract page 1 in place then visit pages 2..min(total, max_pages)."""
        total = detect_total_pages(await self.page.content())
        limit = max(1, min(total, max_pages))
        logger.info(f"Pagination: {total} pages detected, scraping up to {limit}")

        result = PaginatedRecords()
        result.records.extend(await extract())
        result.pages_scraped = 1

        for page_number in range(2, limit + 1):
            await self._go_to_page(page_number)
            current = detect_current_page(await self.page.content(), self.page.url)
            if current != page_number:
                logger.warning(f"Expected page {page_number} but landed on {current}; stopping pagination")
                break
            records = await extract()
            result.pages_scraped += 1
            if not records:
                logger.info(f"Page {page_number} yielded no records")
            result.records.extend(records)

        logger.info(f"Pagination complete: {len(result.records)} records over {result.pages_scraped} pages")
        return result

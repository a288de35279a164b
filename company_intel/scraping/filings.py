"""Filing history extraction with DOM, LLM and hybrid strategies."""
import logging
from typing import Any, Optional

from company_intel.config import config
from company_intel.llm.schemas import ExtractedLink, FilingsSchema, LinkCellSchema
from company_intel.parse.extractors.filings import (
    build_document_link,
    extract_filing_code,
    extract_row_skeletons,
    parse_filing_rows,
)
from company_intel.parse.filing_types import categorize_filing_type
from company_intel.parse.html_parser import is_valid_filing_date, normalize_text
from company_intel.parse.models import DocumentLink, FilingRecord
from company_intel.scraping.strategies import run_strategies

logger = logging.getLogger(__name__)

FILINGS_INSTRUCTION = (
    "Extract every row of the filing history table. For each row return the date "
    "(e.g. '31 Dec 2023'), the full description, and every document download link in "
    "the row with its href, its visible text and the page count if the text shows "
    "'(N pages)'. Links usually point to /document?format=pdf or similar."
)
LINK_CELL_INSTRUCTION = (
    "Extract every document download link in this table cell: href, visible text and "
    "the page count if shown as '(N pages)'."
)
SAMPLE_URLS = 3


def has_document_links(filings: list[FilingRecord]) -> bool:
    """Acceptance test: at least one filing carrying at least one link."""
    return any(f.document_links for f in filings or [])


def convert_links(links: list[ExtractedLink], base_url: Optional[str] = None) -> list[DocumentLink]:
    converted = []
    for link in links:
        doc = build_document_link(link.url, link.text, link.page_count, base_url)
        if doc is not None:
            converted.append(doc)
    return converted


class FilingExtractor:
    """Runs the filing strategies against the current page."""

    def __init__(self, page, hybrid_max_rows: Optional[int] = None):
        self.page = page
        self.hybrid_max_rows = config.HYBRID_MAX_ROWS if hybrid_max_rows is None else hybrid_max_rows

    async def extract_with_dom(self) -> list[FilingRecord]:
        return parse_filing_rows(await self.page.content())

    async def extract_with_llm(self) -> list[FilingRecord]:
        data = await self.page.extract(FILINGS_INSTRUCTION, FilingsSchema)
        filings = []
        for item in data.filings:
            date = normalize_text(item.date)
            description = normalize_text(item.description)
            if not is_valid_filing_date(date) or not description:
                continue
            filings.append(
                FilingRecord(
                    date=date,
                    description=description,
                    type=categorize_filing_type(description),
                    document_links=convert_links(item.document_links),
                    filing_code=extract_filing_code(description),
                )
            )
        logger.info(f"LLM extraction returned {len(filings)} valid filings")
        return filings

    async def extract_with_hybrid(self) -> list[FilingRecord]:
        skeletons = extract_row_skeletons(await self.page.content())
        filings = []
        calls = 0
        for row in skeletons:
            if not is_valid_filing_date(row.date) or not row.description:
                continue
            links: list[DocumentLink] = []
            if calls < self.hybrid_max_rows:
                calls += 1
                try:
                    cell = await self.page.extract(LINK_CELL_INSTRUCTION, LinkCellSchema, html=row.link_cell_html)
                    links = convert_links(cell.links)
                except Exception as e:
                    logger.warning(f"Link extraction failed for filing {row.date}: {e}")
            filings.append(
                FilingRecord(
                    date=row.date,
                    description=row.description,
                    type=categorize_filing_type(row.description),
                    document_links=links,
                    filing_code=row.filing_code,
                )
            )
        if calls and len(filings) > calls:
            logger.info(f"Hybrid extraction capped at {calls} rows; {len(filings) - calls} kept without links")
        return filings

    def strategies(self) -> list[tuple[str, Any]]:
        return [
            ("dom", self.extract_with_dom),
            ("llm", self.extract_with_llm),
            ("hybrid", self.extract_with_hybrid),
        ]

    async def extract(self) -> list[FilingRecord]:
        """Filings from the first strategy that yields document links, else []."""
        name, filings = await run_strategies(self.strategies(), has_document_links, label="Filings")
        if name is None:
            return []
        return filings

    async def compare_strategies(self) -> dict[str, Any]:
        """Run every strategy on the current page and report what each found."""
        results: dict[str, Any] = {}
        for name, attempt in self.strategies():
            try:
                filings = await attempt()
            except Exception as e:
                logger.warning(f"Strategy {name} failed during comparison: {e}")
                results[name] = {"filings": 0, "links": 0, "sampleUrls": [], "error": str(e)}
                continue
            urls = [link.url for f in filings for link in f.document_links]
            results[name] = {"filings": len(filings), "links": len(urls), "sampleUrls": urls[:SAMPLE_URLS]}
        return {"strategies": results, "bestStrategy": best_strategy(results)}


def best_strategy(results: dict[str, dict[str, Any]]) -> str:
    """Most links, then most filings; "none" when no strategy found a link."""
    ranked = sorted(
        results.items(),
        key=lambda item: (item[1].get("links", 0), item[1].get("filings", 0)),
        reverse=True,
    )
    if not ranked or ranked[0][1].get("links", 0) == 0:
        return "none"
    return ranked[0][0]

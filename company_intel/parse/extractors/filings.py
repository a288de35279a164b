"""DOM extraction of the filing history table."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from selectolax.parser import HTMLParser, Node

from company_intel.parse.filing_types import categorize_filing_type
from company_intel.parse.html_parser import (
    absolutize_url,
    classify_document_link,
    extract_page_count,
    is_download_anchor,
    is_registry_url,
    is_valid_filing_date,
    node_text,
)
from company_intel.parse.models import DocumentLink, FilingRecord

logger = logging.getLogger(__name__)

FILING_TABLE_ID = "fhTable"
TABLE_HINTS = ("filing", "history", "results")
FILING_CODE_PATTERN = re.compile(r"\(([A-Z0-9]{2,3})\)")


@dataclass
class FilingRowSkeleton:
    """Date, description and raw link-cell HTML of one table row."""

    date: str
    description: str
    link_cell_html: str
    filing_code: Optional[str] = None


def find_filing_table(parser: HTMLParser) -> Node | None:
    """Locate the filing table: fixed id, then class/summary hints, then header text."""
    table = parser.css_first(f"table#{FILING_TABLE_ID}")
    if table is not None:
        return table

    tables = parser.css("table")
    for candidate in tables:
        hints = " ".join(
            (candidate.attributes.get(attr) or "") for attr in ("class", "summary", "id")
        ).lower()
        if any(hint in hints for hint in TABLE_HINTS):
            logger.debug(f"Filing table matched by attribute hints: {hints!r}")
            return candidate

    for candidate in tables:
        header = candidate.css_first("tr")
        if header is None:
            continue
        header_text = node_text(header).lower()
        if "date" in header_text and ("description" in header_text or "view" in header_text):
            logger.debug("Filing table matched by header row text")
            return candidate

    return None


def _data_rows(table: Node) -> list[list[Node]]:
    """Cells of every row after the header that has at least three <td>."""
    rows = []
    for row in table.css("tr")[1:]:
        cells = row.css("td")
        if len(cells) < 3:
            continue
        rows.append(cells)
    return rows


def _row_fields(cells: list[Node]) -> tuple[str, str, Optional[str]]:
    """Date, description and form code of a row."""
    date = node_text(cells[0])
    if len(cells) > 3:
        type_text = node_text(cells[1])
        description = node_text(cells[2])
    else:
        type_text = ""
        description = node_text(cells[1])
    return date, description, extract_filing_code(description, type_text)


def extract_filing_code(description: str, type_text: str = "") -> Optional[str]:
    """Form code from the type column, else a "(XX)" marker in the description."""
    if type_text and len(type_text) <= 10:
        return type_text
    match = FILING_CODE_PATTERN.search(description or "")
    return match.group(1) if match else None


def build_document_link(
    href: str | None,
    link_text: str | None,
    page_count: str | None = None,
    base_url: str | None = None,
) -> DocumentLink | None:
    """Absolutize, classify and validate one document link."""
    url = absolutize_url(href, base_url)
    if not url or not is_registry_url(url, base_url):
        if href:
            logger.debug(f"Dropping document link outside the registry: {href}")
        return None
    text = (link_text or "").strip() or "View Document"
    count = (page_count or "").strip() or extract_page_count(text)
    return DocumentLink(
        link_text=text,
        link_type=classify_document_link(url, text),
        url=url,
        page_count=count or None,
    )


def extract_document_links(cell: Node, base_url: str | None = None) -> list[DocumentLink]:
    """Collect download anchors of a link cell."""
    links = []
    for anchor in cell.css("a[href]"):
        if not is_download_anchor(anchor):
            continue
        href = anchor.attributes.get("href")
        text = node_text(anchor)
        parent_text = node_text(anchor.parent) if anchor.parent is not None else ""
        link = build_document_link(href, text, extract_page_count(text, parent_text), base_url)
        if link is not None:
            links.append(link)
    return links


def parse_filing_rows(html_content: str, base_url: str | None = None) -> list[FilingRecord]:
    """Parse every valid filing row of the page with its document links."""
    if not html_content:
        return []
    parser = HTMLParser(html_content)
    table = find_filing_table(parser)
    if table is None:
        logger.info("No filing table found on page")
        return []

    filings = []
    skipped = 0
    for cells in _data_rows(table):
        date, description, filing_code = _row_fields(cells)
        if not is_valid_filing_date(date) or not description:
            skipped += 1
            continue
        filings.append(
            FilingRecord(
                date=date,
                description=description,
                type=categorize_filing_type(description),
                document_links=extract_document_links(cells[-1], base_url),
                filing_code=filing_code,
            )
        )

    link_count = sum(len(f.document_links) for f in filings)
    logger.info(f"DOM parse found {len(filings)} filings with {link_count} document links ({skipped} rows skipped)")
    return filings


def extract_row_skeletons(html_content: str) -> list[FilingRowSkeleton]:
    """Rows with date, description and link-cell HTML for per-row LLM extraction."""
    if not html_content:
        return []
    parser = HTMLParser(html_content)
    table = find_filing_table(parser)
    if table is None:
        return []

    skeletons = []
    for cells in _data_rows(table):
        date, description, filing_code = _row_fields(cells)
        skeletons.append(
            FilingRowSkeleton(
                date=date,
                description=description,
                link_cell_html=cells[-1].html or "",
                filing_code=filing_code,
            )
        )
    return skeletons

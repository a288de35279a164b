"""Shared HTML helpers: text, dates, URLs and document-link classification."""
import logging
import re
from datetime import date, datetime
from urllib.parse import urljoin

from selectolax.parser import HTMLParser, Node

from company_intel.config import config

logger = logging.getLogger(__name__)

# Loose "DD Mon YYYY" check applied to every filing row
FILING_DATE_PATTERN = re.compile(r"\d{1,2}\s+\w+\s+\d{4}")
PAGE_COUNT_PATTERN = re.compile(r"\((\d+)\s+pages?\)", re.IGNORECASE)
DOWNLOAD_HREF_MARKER = "document?format="


def normalize_text(text: str | None) -> str:
    """Collapse runs of whitespace into single spaces."""
    if not text:
        return ""
    return " ".join(text.split())


def node_text(node: Node | None) -> str:
    """Normalized text of a node, empty string when missing."""
    if node is None:
        return ""
    return normalize_text(node.text(separator=" "))


def extract_text_by_selector(parser: HTMLParser | Node, selector: str, default: str = "") -> str:
    """Extract text from first matching element."""
    node = parser.css_first(selector)
    return node_text(node) if node else default


def extract_label_values(container: HTMLParser | Node) -> list[tuple[str, str]]:
    """Pair each <dt> label (lowercased) with the <dd> that follows it."""
    pairs = []
    for dt in container.css("dt"):
        label = node_text(dt).lower()
        sibling = dt.next
        while sibling is not None and sibling.tag != "dd":
            if sibling.tag == "dt":
                sibling = None
                break
            sibling = sibling.next
        if sibling is None:
            continue
        value = node_text(sibling)
        if label and value:
            pairs.append((label, value))
    return pairs


def is_valid_filing_date(value: str | None) -> bool:
    """True if the text looks like a UK "DD Mon YYYY" date."""
    return bool(value and FILING_DATE_PATTERN.search(value))


def parse_uk_date(date_str: str | None) -> date | None:
    """Parse "31 Dec 2023" / "31 December 2023" style dates."""
    if not date_str:
        return None
    cleaned = normalize_text(date_str).replace("Sept ", "Sep ")
    formats = [
        "%d %b %Y",
        "%d %B %Y",
        "%Y-%m-%d",
        "%d/%m/%Y",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def absolutize_url(href: str | None, base_url: str | None = None) -> str:
    """Rewrite a registry href to an absolute URL on the registry origin."""
    if not href:
        return ""
    base = (base_url or config.REGISTRY_BASE_URL).rstrip("/")
    href = href.strip()
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    if href.startswith("/"):
        return f"{base}{href}"
    return urljoin(f"{base}/", href)


def is_registry_url(url: str, base_url: str | None = None) -> bool:
    """True if url is absolute and rooted at the registry origin."""
    base = (base_url or config.REGISTRY_BASE_URL).rstrip("/")
    return url == base or url.startswith(f"{base}/")


def classify_document_link(href: str, text: str) -> str:
    """Classify a filing document link as PDF, iXBRL or XML."""
    text_lower = (text or "").lower()
    href_lower = (href or "").lower()
    if "ixbrl" in text_lower or "format=xhtml" in href_lower:
        return "iXBRL"
    if "xml" in text_lower or "format=xml" in href_lower:
        return "XML"
    return "PDF"


def extract_page_count(*texts: str | None) -> str | None:
    """Find the first "(N pages)" marker among the given texts."""
    for text in texts:
        if not text:
            continue
        match = PAGE_COUNT_PATTERN.search(text)
        if match:
            return match.group(1)
    return None


def is_download_anchor(node: Node) -> bool:
    """Registry download anchors carry class "download" or a document?format= href."""
    classes = (node.attributes.get("class") or "").split()
    href = node.attributes.get("href") or ""
    return "download" in classes or DOWNLOAD_HREF_MARKER in href


def strip_for_llm(html_content: str, max_chars: int | None = None) -> str:
    """Drop scripts, styles and chrome so the page fits an LLM prompt."""
    parser = HTMLParser(html_content)
    parser.strip_tags(["script", "style", "noscript", "svg", "head", "iframe"])
    body = parser.body
    cleaned = body.html if body is not None and body.html else (parser.html or "")
    limit = max_chars or config.LLM_MAX_INPUT_CHARS
    if len(cleaned) > limit:
        logger.debug(f"Truncating page HTML for LLM from {len(cleaned)} to {limit} chars")
        cleaned = cleaned[:limit]
    return cleaned

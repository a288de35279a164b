"""Pagination controls on registry list pages."""
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from selectolax.parser import HTMLParser

from company_intel.parse.html_parser import node_text

PAGINATION_ANCHORS = ".govuk-pagination__item a[data-page], .pager a[data-page], a[id^='pageNo'][data-page]"
CURRENT_PAGE_SELECTORS = (
    ".govuk-pagination__item--current",
    ".pager .active",
    "[aria-current='page']",
)


def detect_total_pages(html_content: str) -> int:
    """Largest data-page number among the pagination anchors, 1 without any."""
    if not html_content:
        return 1
    parser = HTMLParser(html_content)
    total = 1
    for anchor in parser.css(PAGINATION_ANCHORS):
        value = (anchor.attributes.get("data-page") or "").strip()
        if value.isdigit():
            total = max(total, int(value))
    return total


def page_from_url(url: str) -> int | None:
    for key, value in parse_qsl(urlsplit(url).query):
        if key == "page" and value.isdigit():
            return int(value)
    return None


def detect_current_page(html_content: str, url: str) -> int:
    """Current page from the URL, else the highlighted pagination item, else 1."""
    from_url = page_from_url(url)
    if from_url is not None:
        return from_url
    if html_content:
        parser = HTMLParser(html_content)
        for selector in CURRENT_PAGE_SELECTORS:
            node = parser.css_first(selector)
            if node is None:
                continue
            text = node_text(node)
            digits = "".join(ch for ch in text if ch.isdigit())
            if digits:
                return int(digits)
    return 1


def build_page_url(url: str, page: int) -> str:
    """Set or replace the page= query parameter."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query) if k != "page"]
    query.append(("page", str(page)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), ""))


def page_control_selectors(page: int) -> list[str]:
    """Selectors of the control that jumps to a numbered page."""
    return [
        f"a#pageNo{page}",
        f".govuk-pagination__item a[data-page='{page}']",
        f"a[data-page='{page}']",
    ]

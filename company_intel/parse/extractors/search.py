"""Company search result parsing."""
import re
from dataclasses import dataclass

from selectolax.parser import HTMLParser

from company_intel.parse.html_parser import absolutize_url, node_text

COMPANY_HREF = re.compile(r"^/company/([A-Z0-9]{8})/?$")
NO_RESULTS_MARKERS = re.compile(r"no results found|no companies found|\b0 results\b")


@dataclass
class SearchHit:
    name: str
    company_number: str
    url: str


def parse_search_results(html_content: str, base_url: str | None = None) -> list[SearchHit]:
    """Company links in result order, one per company number."""
    if not html_content:
        return []
    parser = HTMLParser(html_content)
    hits = []
    seen = set()
    for anchor in parser.css("a[href^='/company/']"):
        href = (anchor.attributes.get("href") or "").split("?")[0]
        match = COMPANY_HREF.match(href)
        if not match or match.group(1) in seen:
            continue
        seen.add(match.group(1))
        hits.append(SearchHit(name=node_text(anchor), company_number=match.group(1), url=absolutize_url(href, base_url)))
    return hits


def has_no_results_marker(html_content: str) -> bool:
    text = node_text(HTMLParser(html_content or "").body).lower()
    return NO_RESULTS_MARKERS.search(text) is not None

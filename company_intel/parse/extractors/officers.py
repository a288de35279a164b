"""DOM extraction of officer appointment cards."""
import logging
import re

from selectolax.parser import HTMLParser, Node

from company_intel.parse.html_parser import (
    absolutize_url,
    extract_label_values,
    extract_text_by_selector,
    node_text,
)
from company_intel.parse.models import OfficerLink, OfficerRecord

logger = logging.getLogger(__name__)

APPOINTMENT_CLASS_PATTERN = re.compile(r"\bappointment-(\d+|card)\b")

# (label substring, OfficerRecord field), first match wins per label.
# "role" is checked first: the role <dt> also contains the status tag.
LABEL_FIELDS = [
    ("role", "role"),
    ("resigned", "resignation_date"),
    ("ceased", "resignation_date"),
    ("appointed", "appointment_date"),
    ("date of birth", "date_of_birth"),
    ("nationality", "nationality"),
    ("country of residence", "country_of_residence"),
    ("occupation", "occupation"),
    ("address", "address"),
]


def classify_officer_link(href: str, in_heading: bool = False) -> str:
    """Tag an officer link as profile, appointment or other."""
    href_lower = href.lower()
    if in_heading and "/officers/" in href_lower:
        return "profile"
    if "appointments" in href_lower:
        return "appointment"
    if "/officers/" in href_lower:
        return "profile"
    return "other"


def _find_cards(parser: HTMLParser) -> list[Node]:
    cards = []
    for node in parser.css("div[class]"):
        if APPOINTMENT_CLASS_PATTERN.search(node.attributes.get("class") or ""):
            cards.append(node)
    return cards


def _card_links(card: Node, base_url: str | None) -> list[OfficerLink]:
    heading_hrefs = {
        anchor.attributes.get("href")
        for anchor in card.css("h2 a[href], h3 a[href]")
    }
    links = []
    seen = set()
    for anchor in card.css("a[href]"):
        href = anchor.attributes.get("href") or ""
        if not href or href.startswith("#") or href.startswith("javascript:"):
            continue
        url = absolutize_url(href, base_url)
        if url in seen:
            continue
        seen.add(url)
        links.append(
            OfficerLink(
                link_text=node_text(anchor) or url,
                url=url,
                link_type=classify_officer_link(href, in_heading=href in heading_hrefs),
            )
        )
    return links


def parse_officer_card(card: Node, base_url: str | None = None) -> OfficerRecord | None:
    """Build an officer record from one appointment card."""
    name = extract_text_by_selector(card, "h2") or extract_text_by_selector(card, "h3")
    if not name:
        return None

    fields: dict[str, str] = {}
    for label, value in extract_label_values(card):
        for needle, field in LABEL_FIELDS:
            if needle in label:
                fields.setdefault(field, value)
                break

    role_node = card.css_first("[id^='officer-role-']")
    if role_node is not None:
        fields["role"] = node_text(role_node)

    status = extract_text_by_selector(card, "[id^='officer-status-tag-'], .status-tag, .govuk-tag")
    if not status:
        status = "Resigned" if fields.get("resignation_date") else "Active"

    return OfficerRecord(
        name=name,
        status=status,
        links=_card_links(card, base_url),
        **fields,
    )


def parse_officers(html_content: str, base_url: str | None = None) -> list[OfficerRecord]:
    """Parse all officer cards on an officers page."""
    if not html_content:
        return []
    parser = HTMLParser(html_content)
    officers = []
    for card in _find_cards(parser):
        officer = parse_officer_card(card, base_url)
        if officer is not None:
            officers.append(officer)
    logger.info(f"DOM parse found {len(officers)} officers")
    return officers

"""DOM extraction of the charges (mortgages) page."""
import logging
import re

from selectolax.parser import HTMLParser, Node

from company_intel.parse.html_parser import (
    extract_label_values,
    extract_text_by_selector,
    node_text,
)
from company_intel.parse.models import ChargeRecord

logger = logging.getLogger(__name__)

MORTGAGE_CLASS_PATTERN = re.compile(r"\bmortgage-\d+\b")
CHARGE_CODE_PATTERN = re.compile(r"charge code\s*([\w ]+?)\s*$", re.IGNORECASE)
NO_CHARGES_MARKERS = ("there are no charges", "no charges registered", "no charges")

LABEL_FIELDS = [
    ("created", "created_date"),
    ("delivered", "delivered_date"),
    ("status", "status"),
    ("persons entitled", "chargeholder"),
    ("chargeholder", "chargeholder"),
    ("short particulars", "description"),
    ("description", "description"),
    ("amount", "secured_amount"),
]


def has_no_charges_marker(html_content: str) -> bool:
    """True when the page states that nothing is registered."""
    text = node_text(HTMLParser(html_content).body).lower()
    return any(marker in text for marker in NO_CHARGES_MARKERS)


def _find_blocks(parser: HTMLParser) -> list[Node]:
    blocks = [
        node
        for node in parser.css("div[class]")
        if MORTGAGE_CLASS_PATTERN.search(node.attributes.get("class") or "")
    ]
    return blocks or parser.css(".charge-item")


def parse_charge_block(block: Node) -> ChargeRecord | None:
    heading = extract_text_by_selector(block, "h2") or extract_text_by_selector(block, "h3")
    fields: dict[str, str] = {}
    for label, value in extract_label_values(block):
        for needle, field in LABEL_FIELDS:
            if needle in label:
                fields.setdefault(field, value)
                break

    status = extract_text_by_selector(block, "[id^='mortgage-status-'], .status-tag")
    if status:
        fields["status"] = status

    if not heading and not fields:
        return None

    code_match = CHARGE_CODE_PATTERN.search(heading)
    if code_match:
        fields.setdefault("charge_code", code_match.group(1).replace(" ", ""))
    if heading:
        fields.setdefault("description", heading)
    return ChargeRecord(**fields)


def parse_charges(html_content: str) -> list[ChargeRecord]:
    """Parse every charge block; an empty list for a page without charges."""
    if not html_content:
        return []
    parser = HTMLParser(html_content)
    charges = []
    for block in _find_blocks(parser):
        charge = parse_charge_block(block)
        if charge is not None:
            charges.append(charge)
    logger.info(f"DOM parse found {len(charges)} charges")
    return charges

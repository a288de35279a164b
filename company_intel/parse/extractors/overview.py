"""DOM extraction of the company overview page."""
import logging
import re

from selectolax.parser import HTMLParser

from company_intel.parse.html_parser import (
    extract_label_values,
    extract_text_by_selector,
    node_text,
)
from company_intel.parse.models import CompanyOverview, SicCode

logger = logging.getLogger(__name__)

COMPANY_NUMBER_PATTERN = re.compile(r"\b([A-Z]{2}\d{6}|\d{8})\b")
SIC_PATTERN = re.compile(r"(\d{5})\s*-\s*(.+)")


def _company_number(parser: HTMLParser) -> str | None:
    text = extract_text_by_selector(parser, "#company-number strong") or extract_text_by_selector(
        parser, "#company-number, p.heading-medium"
    )
    match = COMPANY_NUMBER_PATTERN.search(text or "")
    return match.group(1) if match else None


def _sic_codes(parser: HTMLParser) -> list[SicCode]:
    codes = []
    for node in parser.css("#sic-codes li, [id^='sic'] span, [id^='sic']"):
        match = SIC_PATTERN.search(node_text(node))
        if match and match.group(1) not in {c.code for c in codes}:
            codes.append(SicCode(code=match.group(1), description=match.group(2).strip()))
    return codes


def parse_overview(html_content: str) -> CompanyOverview | None:
    """Parse the overview page; None when the company name cannot be found."""
    if not html_content:
        return None
    parser = HTMLParser(html_content)

    name = extract_text_by_selector(parser, "#company-name") or extract_text_by_selector(
        parser, "h1.heading-xlarge, h1"
    )
    if not name:
        logger.info("Overview DOM parse found no company name")
        return None

    overview = CompanyOverview(company_name=name, company_number=_company_number(parser))

    status = extract_text_by_selector(parser, "#company-status")
    if status:
        overview.status = status
    incorporated = extract_text_by_selector(parser, "#company-creation-date")
    if incorporated:
        overview.incorporation_date = incorporated
    company_type = extract_text_by_selector(parser, "#company-type")
    if company_type:
        overview.company_type = company_type

    for label, value in extract_label_values(parser):
        if "status" in label and not overview.status:
            overview.status = value
        elif ("incorporated" in label or "formation" in label) and not overview.incorporation_date:
            overview.incorporation_date = value
        elif "address" in label and not overview.registered_address:
            overview.registered_address = value
        elif "type" in label and not overview.company_type:
            overview.company_type = value
        elif "nature of business" in label and not overview.nature_of_business:
            overview.nature_of_business = value

    overview.sic_codes = _sic_codes(parser)
    if overview.sic_codes and not overview.nature_of_business:
        overview.nature_of_business = "; ".join(f"{c.code} - {c.description}" for c in overview.sic_codes)

    return overview

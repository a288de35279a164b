"""Filing compliance analysis and the AI business-intelligence summary."""
import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from company_intel.parse.filing_types import is_accounts_type
from company_intel.parse.html_parser import parse_uk_date
from company_intel.parse.models import FilingRecord, ScrapingResult

logger = logging.getLogger(__name__)

RECENT_FILINGS_SHOWN = 20
YEARS_SHOWN = 10
RETURN_TYPES = ("Confirmation Statement", "Annual Return")


@dataclass
class ComplianceAnalysis:
    compliance_status: str
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    filing_stats: dict[str, Any] = field(default_factory=dict)


def _dated(filings: list[FilingRecord]) -> list[tuple[date, FilingRecord]]:
    out = []
    for filing in filings:
        parsed = parse_uk_date(filing.date)
        if parsed is not None:
            out.append((parsed, filing))
    return out


def analyze_filing_compliance(filings: list[FilingRecord], today: Optional[date] = None) -> ComplianceAnalysis:
    """Check the filing record for missing annual filings and stale accounts."""
    today = today or date.today()
    issues: list[str] = []
    recommendations: list[str] = []
    dated = _dated(filings)

    by_year: dict[int, list[FilingRecord]] = defaultdict(list)
    by_type: dict[str, list[tuple[date, FilingRecord]]] = defaultdict(list)
    for filed_on, filing in dated:
        by_year[filed_on.year].append(filing)
        by_type[filing.type].append((filed_on, filing))

    for year in (today.year - 1, today.year - 2, today.year - 3):
        year_filings = by_year.get(year, [])
        if not any(is_accounts_type(f.type) for f in year_filings):
            issues.append(f"Missing annual accounts for {year}")
        if not any(f.type in RETURN_TYPES for f in year_filings):
            issues.append(f"Missing confirmation statement/annual return for {year}")

    six_months_ago = today - timedelta(days=183)
    if not any(filed_on > six_months_ago for filed_on, _ in dated):
        issues.append("No filings in the last 6 months")
        recommendations.append("Check if company is still trading and up to date with filing requirements")

    accounts_dates = [filed_on for filed_on, f in dated if is_accounts_type(f.type)]
    if accounts_dates and max(accounts_dates) < today - timedelta(days=365):
        issues.append("Annual accounts may be overdue")
        recommendations.append("Verify current filing status and deadlines")

    if not issues:
        status = "Good"
    elif len(issues) > 2:
        status = "Poor"
    else:
        status = "Warning"

    links = [link for f in filings for link in f.document_links]
    filing_stats = {
        "totalFilings": len(filings),
        "filingsByType": [
            {
                "type": filing_type,
                "count": len(entries),
                "mostRecent": max(entries, key=lambda e: e[0])[1].date,
            }
            for filing_type, entries in by_type.items()
        ],
        "filingsByYear": [
            {"year": year, "count": len(by_year[year])} for year in sorted(by_year, reverse=True)
        ],
        "documentTypes": dict(Counter(link.link_type for link in links)),
        "pdfDocumentCount": sum(1 for link in links if link.link_type == "PDF"),
    }
    return ComplianceAnalysis(status, issues, recommendations, filing_stats)


def _or_unknown(value: Optional[str]) -> str:
    return value or "Not specified"


def build_analysis_text(result: ScrapingResult, today: Optional[date] = None) -> str:
    """Flatten the scraping result into the text block fed to the summary prompt."""
    lines = [f"COMPREHENSIVE COMPANY ANALYSIS FOR: {result.query}", ""]

    overview = result.overview
    if overview is not None:
        lines += [
            "=== COMPANY OVERVIEW ===",
            f"Company Name: {_or_unknown(overview.company_name)}",
            f"Company Number: {_or_unknown(overview.company_number)}",
            f"Status: {_or_unknown(overview.status)}",
            f"Incorporation Date: {_or_unknown(overview.incorporation_date)}",
            f"Company Type: {_or_unknown(overview.company_type)}",
        ]
        if overview.registered_address:
            lines.append(f"Registered Address: {overview.registered_address}")
        if overview.sic_codes:
            lines.append("SIC Codes:")
            lines += [f"  - {sic.code}: {sic.description}" for sic in overview.sic_codes]
        elif overview.nature_of_business:
            lines.append(f"Nature of Business: {overview.nature_of_business}")
        lines.append("")

    filing = result.filing
    if filing is not None and filing.filings:
        compliance = analyze_filing_compliance(filing.filings, today)
        stats = compliance.filing_stats
        lines += [
            "=== COMPREHENSIVE FILING HISTORY ===",
            f"Total Filings Extracted: {filing.total_filings}",
            f"Pages Processed: {filing.pages_scraped}",
        ]
        if filing.date_range is not None:
            lines.append(f"Filing Period: {filing.date_range.earliest} to {filing.date_range.latest}")
        lines += [f"Compliance Status: {compliance.compliance_status}", ""]
        if compliance.issues:
            lines.append("COMPLIANCE ISSUES IDENTIFIED:")
            lines += [f"  - {issue}" for issue in compliance.issues]
            lines.append("")
        if compliance.recommendations:
            lines.append("RECOMMENDATIONS:")
            lines += [f"  - {rec}" for rec in compliance.recommendations]
            lines.append("")

        lines += [
            "FILING STATISTICS:",
            f"Document Success Rate: {filing.statistics.document_success_rate}%",
            f"Total PDF Documents Available: {stats['pdfDocumentCount']}",
            "",
            "Filings by Type:",
        ]
        lines += [
            f"  - {t['type']}: {t['count']} filings (most recent: {t['mostRecent']})" for t in stats["filingsByType"]
        ]
        lines += ["", "Filings by Year:"]
        lines += [f"  - {y['year']}: {y['count']} filings" for y in stats["filingsByYear"][:YEARS_SHOWN]]

        recent = sorted(
            filing.filings,
            key=lambda f: parse_uk_date(f.date) or date.min,
            reverse=True,
        )[:RECENT_FILINGS_SHOWN]
        lines += ["", f"RECENT FILINGS (Last {RECENT_FILINGS_SHOWN}):"]
        for item in recent:
            lines.append(f"{item.date} - {item.type}: {item.description}")
            if item.document_links:
                docs = ", ".join(
                    f"{link.link_type} ({link.page_count} pages)" if link.page_count else link.link_type
                    for link in item.document_links
                )
                lines.append(f"  Documents: {docs}")
        lines.append("")

    people = result.people
    if people is not None and people.officers:
        lines += [
            "=== COMPANY OFFICERS ===",
            f"Total Officers: {people.total_officers} ({people.active_officers} active)",
        ]
        for officer in people.officers:
            lines.append(f"Name: {officer.name}")
            lines.append(f"  Role: {_or_unknown(officer.role)}")
            lines.append(f"  Appointed: {_or_unknown(officer.appointment_date)}")
            if officer.resignation_date:
                lines.append(f"  Resigned: {officer.resignation_date}")
            if officer.nationality:
                lines.append(f"  Nationality: {officer.nationality}")
            lines.append("")

    charges = result.charges
    if charges is not None:
        lines.append("=== CHARGES AND SECURITY ===")
        if not charges.charges:
            lines.append("No charges registered")
        for charge in charges.charges:
            lines.append(f"{_or_unknown(charge.created_date)} - {charge.status or 'Unknown status'}: {charge.description}")
            if charge.chargeholder:
                lines.append(f"  Persons entitled: {charge.chargeholder}")
            if charge.secured_amount:
                lines.append(f"  Amount secured: {charge.secured_amount}")
        lines.append("")

    return "\n".join(lines)


def build_summary_prompt(company: str, result: ScrapingResult, today: Optional[date] = None) -> str:
    analysis = build_analysis_text(result, today)
    filing = result.filing
    total_filings = filing.total_filings if filing else 0
    pages_scraped = filing.pages_scraped if filing else 0
    pdf_count = (
        sum(1 for f in filing.filings for link in f.document_links if link.link_type == "PDF") if filing else 0
    )
    return f"""You are a UK business analyst specializing in comprehensive company intelligence. Analyze the following detailed company data for "{company}" and create an executive-level business intelligence report.

{analysis}

Create a comprehensive analysis with the following sections:

1. **EXECUTIVE SUMMARY** - Key findings and overall company assessment

2. **BUSINESS PROFILE** - Incorporation details, business nature, and operational status

3. **FILING COMPLIANCE ANALYSIS** - Assessment of regulatory compliance based on the filing history
   - Filing patterns, compliance status and any red flags
   - Comprehensiveness of the record ({total_filings} filings from {pages_scraped} pages)

4. **GOVERNANCE & CONTROL STRUCTURE** - Officers, directors and persons with significant control

5. **FINANCIAL OBLIGATIONS & SECURITY** - Charges, mortgages and secured interests

6. **DOCUMENT AVAILABILITY** - Available documents and their accessibility
   - {pdf_count} PDF documents are available for review

7. **RISK ASSESSMENT** - Compliance, financial, governance and operational risks

8. **DUE DILIGENCE RECOMMENDATIONS** - Key documents to review, areas needing further investigation and red flags requiring immediate attention

Focus on actionable business intelligence suitable for investment decisions, partnership assessments or regulatory compliance."""


async def generate_summary(llm, company: str, result: ScrapingResult) -> str:
    """One free-text LLM call over the assembled prompt."""
    prompt = build_summary_prompt(company, result)
    logger.info(f"Generating AI summary for {company} ({len(prompt)} prompt chars)")
    return await llm.generate(prompt)

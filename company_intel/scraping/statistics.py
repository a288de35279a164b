"""Filing statistics and the extraction quality score."""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from company_intel.parse.html_parser import parse_uk_date
from company_intel.parse.models import DateRange, FilingRecord, FilingStatistics, ScrapingResult

logger = logging.getLogger(__name__)


@dataclass
class QualityAssessment:
    score: int
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def compute_filing_statistics(filings: list[FilingRecord]) -> FilingStatistics:
    total = len(filings)
    with_docs = sum(1 for f in filings if f.document_links)
    pages = 0
    for filing in filings:
        for link in filing.document_links:
            if link.page_count and link.page_count.strip().isdigit():
                pages += int(link.page_count)
    return FilingStatistics(
        total_filings=total,
        filings_with_documents=with_docs,
        total_document_pages=pages,
        document_success_rate=int(100 * with_docs / total + 0.5) if total else 0,
        filing_types=dict(Counter(f.type for f in filings)),
    )


def compute_date_range(filings: list[FilingRecord]) -> Optional[DateRange]:
    dates = [d for d in (parse_uk_date(f.date) for f in filings) if d is not None]
    if not dates:
        return None
    return DateRange(earliest=min(dates).isoformat(), latest=max(dates).isoformat())


def assess_quality(result: ScrapingResult) -> QualityAssessment:
    """Score 0-100 from which sections were extracted and how complete they are."""
    score = 0
    issues: list[str] = []
    recommendations: list[str] = []

    overview = result.overview
    if overview is not None:
        score += 5
        if overview.company_name:
            score += 10
        else:
            issues.append("Company name missing from overview")
        if overview.company_number:
            score += 10
        else:
            issues.append("Company number missing from overview")
    else:
        issues.append("No company overview extracted")
        recommendations.append("Verify the company search returned the correct company page")

    filing = result.filing
    if filing is not None and filing.filings:
        score += 25
        rate = filing.statistics.document_success_rate
        if rate > 80:
            score += 15
        elif rate > 50:
            score += 10
        elif rate > 20:
            score += 5
        else:
            issues.append("Low document link extraction rate")
            recommendations.append("Compare extraction strategies on the filing history page")
        if len(filing.filings) < 3:
            issues.append("Very limited filing history")
    else:
        issues.append("No filing history extracted")
        recommendations.append("Check the filing history page structure or retry later")

    if result.people is not None and result.people.officers:
        score += 20
    else:
        issues.append("No officer information extracted")
        recommendations.append("Review the officers page manually")

    if result.charges is not None:
        score += 15
    else:
        issues.append("Charges section not accessible")

    score = max(0, min(100, score))
    return QualityAssessment(score=score, issues=issues, recommendations=recommendations)


def quality_band(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Poor"


def quality_report(score: int, issues: list[str], recommendations: Optional[list[str]] = None) -> str:
    """Plain-text data quality report."""
    lines = [
        "DATA QUALITY REPORT",
        f"Overall score: {score}/100 ({quality_band(score)})",
    ]
    if issues:
        lines.append("")
        lines.append("Issues identified:")
        lines.extend(f"- {issue}" for issue in issues)
    if recommendations:
        lines.append("")
        lines.append("Recommendations:")
        lines.extend(f"- {rec}" for rec in recommendations)
    if not issues:
        lines.append("")
        lines.append("No data quality issues identified.")
    return "\n".join(lines)

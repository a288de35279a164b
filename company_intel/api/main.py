"""FastAPI main application."""
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, ConfigDict, Field

from company_intel.config import config
from company_intel.errors import classify_error
from company_intel.logging_conf import setup_logging
from company_intel.parse.models import CompanyReport
from company_intel.scraping.orchestrator import clamp_pages, run_company_report, run_strategy_comparison
from company_intel.store.supabase_writer import ReportWriter

logger = logging.getLogger(__name__)

setup_logging()

app = FastAPI(title="Company Intelligence API", version="0.1.0")

# API Key security (if configured)
API_KEY_HEADER = APIKeyHeader(name="X-API-KEY", auto_error=False)

COMPANY_NUMBER_PATTERN = re.compile(r"^[A-Z0-9]{8}$")
UNSAFE_INPUT_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"data:", re.IGNORECASE),
]


def verify_api_key(api_key: str = Depends(API_KEY_HEADER)) -> bool:
    """Verify API key if configured."""
    expected_key = config.API_KEY
    if expected_key:
        if not api_key or api_key != expected_key:
            raise HTTPException(status_code=403, detail="Invalid API key")
    return True


def _init_writer() -> Optional[ReportWriter]:
    if not config.supabase_enabled():
        logger.info("Supabase not configured, reports will not be persisted")
        return None
    try:
        return ReportWriter()
    except Exception as e:
        logger.warning(f"Supabase writer initialization failed: {e}")
        return None


writer = _init_writer()


class ReportRequest(BaseModel):
    """Request model for an enhanced company report."""

    model_config = ConfigDict(populate_by_name=True)

    company: Optional[str] = None
    max_pages: Optional[int] = Field(None, alias="maxPages")
    max_people_pages: Optional[int] = Field(None, alias="maxPeoplePages")


def validate_company_name(company: Optional[str]) -> Optional[str]:
    """Return an error message for an unusable company name, None when valid."""
    if company is None or not isinstance(company, str):
        return "Company name is required"
    name = company.strip()
    if len(name) < 2:
        return "Company name must be at least 2 characters"
    if len(name) > 200:
        return "Company name must be at most 200 characters"
    if any(pattern.search(name) for pattern in UNSAFE_INPUT_PATTERNS):
        return "Company name contains invalid characters"
    return None


def _error_response(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error_code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


async def _save_report(report: CompanyReport) -> None:
    """Save report to Supabase (background task)."""
    if writer is None:
        return
    try:
        await writer.save_report(report)
    except Exception as e:
        logger.error(f"Error saving report for {report.result.query}: {e}")


@app.get("/api/health")
async def health():
    """Health check endpoint (no auth required)."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "llm_configured": bool(config.ANTHROPIC_API_KEY),
        "supabase_connected": await writer.test_connection() if writer is not None else False,
    }


@app.post("/api/enhanced-report")
async def enhanced_report(
    request: ReportRequest,
    background_tasks: BackgroundTasks,
    _: bool = Depends(verify_api_key),
):
    """Scrape a company and return the structured data with the AI summary."""
    problem = validate_company_name(request.company)
    if problem:
        return _error_response(400, "VALIDATION_ERROR", problem)

    company = request.company.strip()
    max_pages = clamp_pages(request.max_pages, config.DEFAULT_MAX_PAGES)
    max_people_pages = clamp_pages(request.max_people_pages, config.DEFAULT_MAX_PEOPLE_PAGES)
    logger.info(f"Enhanced report requested for {company!r} (pages={max_pages}, people pages={max_people_pages})")

    try:
        report = await run_company_report(company, max_pages=max_pages, max_people_pages=max_people_pages)
    except Exception as e:
        classification = classify_error(e, company)
        logger.error(f"Report for {company!r} failed ({classification.error_code}): {e}")
        return _error_response(classification.status_code, classification.error_code, classification.user_message)

    background_tasks.add_task(_save_report, report)

    result = report.result
    filing = result.filing
    return {
        "success": True,
        "company": company,
        "data": result.to_dict(),
        "llm_summary": report.summary,
        "metadata": {
            "summaryGenerated": report.summary_generated,
            "qualityScore": result.quality_score,
            "dataIssues": result.data_issues,
            "totalFilings": filing.total_filings if filing else 0,
            "pagesScraped": filing.pages_scraped if filing else 0,
            "documentSuccessRate": filing.statistics.document_success_rate if filing else 0,
            "durationMs": report.duration_ms,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


@app.get("/api/test-pdf-extraction/{company_number}")
async def test_pdf_extraction(company_number: str, _: bool = Depends(verify_api_key)):
    """Compare filing extraction strategies on one company's filing history."""
    number = company_number.strip().upper()
    if not COMPANY_NUMBER_PATTERN.match(number):
        return _error_response(400, "VALIDATION_ERROR", "Company number must be 8 letters or digits")
    try:
        comparison = await run_strategy_comparison(number)
    except Exception as e:
        classification = classify_error(e, number)
        logger.error(f"Strategy comparison for {number} failed: {e}")
        return _error_response(classification.status_code, classification.error_code, classification.user_message)
    return {"success": True, **comparison}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

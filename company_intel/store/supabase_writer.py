"""Supabase writer for company reports with upsert and retries."""
import asyncio
import logging
from datetime import datetime, timezone

from supabase import Client, create_client
from tenacity import retry, stop_after_attempt, wait_exponential

from company_intel.config import config
from company_intel.parse.models import CompanyReport

logger = logging.getLogger(__name__)


class ReportWriter:
    """Persists one row per company number; the latest report wins."""

    def __init__(self, client: Client | None = None):
        if client is None:
            if not config.supabase_enabled():
                raise ValueError("Supabase configuration missing")
            client = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE)
        self.client = client
        self.table = config.SUPABASE_TABLE

    async def save_report(self, report: CompanyReport) -> None:
        """Upsert a report (runs in thread pool since Supabase is sync)."""
        row = self._report_to_row(report)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._upsert_sync, row)
            logger.info(f"Saved report for {row['company_name']} ({row['company_number']}) to Supabase")
        except Exception as e:
            logger.error(f"Supabase upsert error: {e}")
            raise

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _upsert_sync(self, row: dict) -> None:
        """Synchronous upsert (called from thread pool)."""
        (
            self.client.table(self.table)
            .upsert(row, on_conflict="company_number")
            .execute()
        )

    def _report_to_row(self, report: CompanyReport) -> dict:
        result = report.result
        overview = result.overview
        filing = result.filing
        company_number = overview.company_number if overview and overview.company_number else None
        return {
            "company_number": company_number or result.query.upper(),
            "company_name": (overview.company_name if overview else None) or result.query,
            "query": result.query,
            "quality_score": result.quality_score,
            "total_filings": filing.total_filings if filing else 0,
            "summary": report.summary,
            "summary_generated": report.summary_generated,
            "data": report.to_dict(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

    async def test_connection(self) -> bool:
        """Test Supabase connection."""
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(
                None,
                lambda: (
                    self.client.table(self.table)
                    .select("company_number", count="exact")
                    .limit(1)
                    .execute()
                ),
            )
            logger.info("Supabase connection successful")
            return True
        except Exception as e:
            logger.error(f"Supabase connection test failed: {e}")
            return False

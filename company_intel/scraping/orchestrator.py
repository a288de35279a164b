"""Report orchestration: search, section extraction, quality scoring and summary."""
import logging
import time
from typing import Any, Callable, Optional
from urllib.parse import quote_plus

from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from company_intel.browser.session import BrowserSession
from company_intel.config import config
from company_intel.errors import CompanyNotFoundError, CompanySearchError, ExtractionError, ScraperError
from company_intel.llm.client import LLMClient
from company_intel.llm.schemas import ChargesSchema, OverviewSchema
from company_intel.parse.extractors.charges import has_no_charges_marker, parse_charges
from company_intel.parse.extractors.overview import parse_overview
from company_intel.parse.extractors.search import has_no_results_marker, parse_search_results
from company_intel.parse.models import (
    ChargeRecord,
    ChargesSection,
    CompanyOverview,
    CompanyReport,
    FilingSection,
    PeopleSection,
    ScrapingResult,
)
from company_intel.scraping.filings import FilingExtractor
from company_intel.scraping.navigator import Navigator
from company_intel.scraping.paginator import Paginator
from company_intel.scraping.people import PeopleExtractor
from company_intel.scraping.statistics import (
    assess_quality,
    compute_date_range,
    compute_filing_statistics,
    quality_report,
)
from company_intel.summary import summarizer

logger = logging.getLogger(__name__)

COOKIE_SELECTORS = [
    "button[value='accept']",
    "button#cookie-accept-all-button",
    ".js-accept-cookies",
]
SEARCH_INPUT_SELECTORS = ["#site-search-text", "input#searchText", "input[name='q']"]

OVERVIEW_INSTRUCTION = (
    "Extract the company overview: name, company number, status, incorporation date, "
    "company type, registered office address and nature of business (SIC)."
)
CHARGES_INSTRUCTION = (
    "Extract every charge (mortgage) listed: charge code, description, status, created "
    "date, delivered date, persons entitled and amount secured. Set no_charges if the "
    "page says there are no charges registered."
)

_network_retry = retry(
    stop=stop_after_attempt(config.MAX_RETRIES),
    wait=wait_incrementing(start=config.RETRY_DELAY, increment=config.RETRY_DELAY),
    retry=retry_if_not_exception_type(CompanyNotFoundError),
    reraise=True,
)


def clamp_pages(value: Optional[int], default: int) -> int:
    """Coerce a page limit into [1, MAX_PAGES_LIMIT]."""
    if value is None:
        return default
    return max(1, min(config.MAX_PAGES_LIMIT, int(value)))


class CompanyScraper:
    """Runs every scraping phase against one borrowed page handle."""

    def __init__(self, page):
        self.page = page
        self.navigator = Navigator(page)
        self.paginator = Paginator(page)

    @_network_retry
    async def open_registry(self) -> None:
        await self.page.goto(config.REGISTRY_BASE_URL)
        await self.page.wait_for_load()
        for selector in COOKIE_SELECTORS:
            if await self.page.click_selector(selector):
                logger.debug("Accepted cookie banner")
                break

    async def _submit_search(self, company: str) -> None:
        for selector in SEARCH_INPUT_SELECTORS:
            if await self.page.fill(selector, company):
                await self.page.press(selector, "Enter")
                await self.page.wait_for_load()
                return
        try:
            if await self.page.act(f'Type "{company}" into the company search box and submit the search'):
                await self.page.wait_for_load()
                return
        except ScraperError as e:
            logger.warning(f"Search box action failed: {e}")
        await self.page.goto(f"{config.REGISTRY_BASE_URL}/search/companies?q={quote_plus(company)}")
        await self.page.wait_for_load()

    @_network_retry
    async def search_company(self, company: str) -> str:
        """Search the registry and open the first matching company; returns its URL."""
        logger.info(f"Searching registry for {company!r}")
        await self._submit_search(company)
        html = await self.page.content()
        hits = parse_search_results(html)
        if not hits:
            if has_no_results_marker(html):
                raise CompanyNotFoundError(f"No companies found for {company!r}")
            raise CompanySearchError(f"Could not read search results for {company!r}")
        hit = hits[0]
        logger.info(f"Selected {hit.name} ({hit.company_number})")
        await self.page.goto(hit.url)
        await self.page.wait_for_load()
        return hit.url

    async def extract_overview(self) -> Optional[CompanyOverview]:
        overview = parse_overview(await self.page.content())
        if overview is not None and overview.company_name:
            return overview
        logger.warning("Overview DOM parse failed, falling back to LLM extraction")
        data = await self.page.extract(OVERVIEW_INSTRUCTION, OverviewSchema)
        if not data.company_name:
            raise ExtractionError("Company overview could not be extracted")
        return CompanyOverview(**data.model_dump())

    async def extract_filing_history(self, max_pages: int) -> Optional[FilingSection]:
        await self.navigator.navigate_to_section("filing history")
        extractor = FilingExtractor(self.page)
        paged = await self.paginator.extract_all_pages(extractor.extract, max_pages)
        if not paged.records:
            logger.warning("No filings extracted")
            return None
        filings = paged.records
        return FilingSection(
            filings=filings,
            total_filings=len(filings),
            pages_scraped=paged.pages_scraped,
            statistics=compute_filing_statistics(filings),
            date_range=compute_date_range(filings),
        )

    async def extract_people(self, max_people_pages: int) -> Optional[PeopleSection]:
        await self.navigator.navigate_to_section("people")
        extractor = PeopleExtractor(self.page)
        paged = await self.paginator.extract_all_pages(extractor.extract, max_people_pages)
        if not paged.records:
            return None
        officers = paged.records
        return PeopleSection(
            officers=officers,
            total_officers=len(officers),
            active_officers=sum(1 for o in officers if o.is_active),
            pages_scraped=paged.pages_scraped,
        )

    async def extract_charges(self) -> ChargesSection:
        await self.navigator.navigate_to_section("charges")
        html = await self.page.content()
        charges = parse_charges(html)
        if not charges and not has_no_charges_marker(html):
            try:
                data = await self.page.extract(CHARGES_INSTRUCTION, ChargesSchema)
                charges = [ChargeRecord(**item.model_dump()) for item in data.charges]
            except Exception as e:
                logger.warning(f"Charges LLM extraction failed: {e}")
        return ChargesSection(charges=charges, total_charges=len(charges))

    async def _phase(self, name: str, step: Callable[[], Any]) -> Any:
        logger.info(f"--- {name} ---")
        try:
            return await step()
        except Exception as e:
            logger.error(f"{name} failed: {e}")
            return None

    async def scrape_company(
        self,
        company: str,
        max_pages: Optional[int] = None,
        max_people_pages: Optional[int] = None,
    ) -> ScrapingResult:
        """Locate the company then run every extraction phase; only search errors propagate."""
        max_pages = clamp_pages(max_pages, config.DEFAULT_MAX_PAGES)
        max_people_pages = clamp_pages(max_people_pages, config.DEFAULT_MAX_PEOPLE_PAGES)
        result = ScrapingResult(query=company)

        await self.open_registry()
        await self.search_company(company)

        result.overview = await self._phase("Overview", self.extract_overview)
        result.filing = await self._phase("Filing history", lambda: self.extract_filing_history(max_pages))
        result.people = await self._phase("People", lambda: self.extract_people(max_people_pages))
        result.charges = await self._phase("Charges", self.extract_charges)

        assessment = assess_quality(result)
        result.quality_score = assessment.score
        result.data_issues = assessment.issues
        result.recommendations = assessment.recommendations
        logger.info(f"Quality score for {company}: {assessment.score}/100")
        return result


async def build_report(llm, company: str, result: ScrapingResult, with_summary: bool = True) -> CompanyReport:
    """Attach the quality report and, when quality allows, the AI narrative."""
    report_text = quality_report(result.quality_score, result.data_issues, result.recommendations)
    report = CompanyReport(result=result, quality_report=report_text)
    if not with_summary:
        report.summary = report_text
        return report
    if result.quality_score < config.QUALITY_MIN_SCORE:
        logger.warning(f"Skipping AI summary, quality score {result.quality_score} below {config.QUALITY_MIN_SCORE}")
        report.summary = (
            f"Data quality insufficient for AI analysis (score: {result.quality_score}/100).\n\n{report_text}"
        )
        return report
    try:
        report.summary = await summarizer.generate_summary(llm, company, result)
        report.summary_generated = True
    except Exception as e:
        logger.error(f"AI summary generation failed: {e}")
        report.summary = f"AI summary generation failed: {e}\n\n{report_text}"
    return report


async def run_company_report(
    company: str,
    max_pages: Optional[int] = None,
    max_people_pages: Optional[int] = None,
    generate_summary: bool = True,
    llm: Optional[LLMClient] = None,
    session_factory: Callable[..., Any] = BrowserSession,
) -> CompanyReport:
    """Full pipeline for one company inside its own browser session."""
    started = time.monotonic()
    llm = llm or LLMClient()
    async with session_factory(llm=llm) as page:
        result = await CompanyScraper(page).scrape_company(company, max_pages, max_people_pages)
    report = await build_report(llm, company, result, with_summary=generate_summary)
    report.duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(f"Report for {company} finished in {report.duration_ms}ms")
    return report


async def run_strategy_comparison(
    company_number: str,
    llm: Optional[LLMClient] = None,
    session_factory: Callable[..., Any] = BrowserSession,
) -> dict[str, Any]:
    """Run all filing strategies against one company's filing history page."""
    llm = llm or LLMClient()
    url = f"{config.REGISTRY_BASE_URL}/company/{company_number}/filing-history"
    async with session_factory(llm=llm) as page:
        await page.goto(url)
        await page.wait_for_load()
        comparison = await FilingExtractor(page).compare_strategies()
    comparison["companyNumber"] = company_number
    comparison["url"] = url
    return comparison

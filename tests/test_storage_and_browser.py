"""Tests for dev storage, the strategy runner, settle delays and text clicks."""
import orjson

from company_intel.browser.page import RegistryPage, settle_delay_ms
from company_intel.parse.models import CompanyReport, ScrapingResult
from company_intel.scraping.strategies import run_strategies
from company_intel.store.dev_storage import DevStorage, slugify


def test_slugify():
    assert slugify("Acme Widgets (UK) Ltd") == "acme-widgets-uk-ltd"
    assert slugify("!!!") == "company"


def test_dev_storage_writes_result_and_summary(tmp_path):
    report = CompanyReport(result=ScrapingResult(query="Acme Widgets", quality_score=50), summary="Narrative")
    report_dir = DevStorage(base_dir=tmp_path).save_report(report)
    data = orjson.loads((report_dir / "result.json").read_bytes())
    assert data["result"]["qualityScore"] == 50
    assert "Narrative" in (report_dir / "summary.md").read_text(encoding="utf-8")


def test_settle_delay_bounds():
    """The delay grows with DOM complexity and stays within its bounds."""
    assert settle_delay_ms(0, 0, 0, min_delay=1500, max_delay=8000) == 1500
    assert settle_delay_ms(2, 100, 1, min_delay=500, max_delay=8000) == 1000 + 600 + 500 + 200
    assert settle_delay_ms(50, 2000, 10, min_delay=500, max_delay=8000) == 8000


async def test_run_strategies_skips_failures_and_rejections():
    async def broken():
        raise RuntimeError("boom")

    async def empty():
        return []

    async def good():
        return [1]

    name, result = await run_strategies(
        [("broken", broken), ("empty", empty), ("good", good)], accept=bool, label="test"
    )
    assert name == "good"
    assert result == [1]


async def test_run_strategies_exhausted():
    async def empty():
        return []

    assert await run_strategies([("empty", empty)], accept=bool) == (None, None)


class FakeTable:
    def __init__(self, calls):
        self.calls = calls

    def upsert(self, row, on_conflict=None):
        self.calls.append((row, on_conflict))
        return self

    def execute(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.calls = []

    def table(self, name):
        return FakeTable(self.calls)


async def test_report_writer_upserts_on_company_number():
    """One row per company number, carrying the full report as JSON."""
    from company_intel.parse.models import CompanyOverview
    from company_intel.store.supabase_writer import ReportWriter

    fake = FakeSupabase()
    result = ScrapingResult(
        query="Acme",
        quality_score=70,
        overview=CompanyOverview(company_name="ACME LIMITED", company_number="01234567"),
    )
    await ReportWriter(client=fake).save_report(CompanyReport(result=result, summary="Narrative"))
    row, conflict = fake.calls[0]
    assert conflict == "company_number"
    assert row["company_number"] == "01234567"
    assert row["company_name"] == "ACME LIMITED"
    assert row["data"]["result"]["qualityScore"] == 70


class FakeLocator:
    def __init__(self, name, visible=True):
        self.name = name
        self.visible = visible
        self.clicked = False

    async def is_visible(self):
        return self.visible

    async def click(self):
        self.clicked = True


class FakeRoleQuery:
    def __init__(self, locators):
        self.locators = locators

    async def all(self):
        return self.locators


class FakePlaywrightPage:
    def __init__(self, by_role):
        self.by_role = by_role
        self.queries = []

    def get_by_role(self, role, name=None):
        self.queries.append((role, name))
        return FakeRoleQuery([loc for loc in self.by_role.get(role, []) if name.search(loc.name)])


async def test_click_text_clicks_first_visible_link_through_locator():
    """Hidden matches are skipped and the click goes through the locator."""
    hidden = FakeLocator("Filing history", visible=False)
    shown = FakeLocator("Filing History")
    page = FakePlaywrightPage({"link": [FakeLocator("People"), hidden, shown]})
    assert await RegistryPage(page).click_text("filing history")
    assert shown.clicked
    assert not hidden.clicked


async def test_click_text_falls_back_to_buttons():
    button = FakeLocator("Show charges (2)")
    page = FakePlaywrightPage({"link": [], "button": [button]})
    assert await RegistryPage(page).click_text("charges")
    assert button.clicked
    assert [role for role, _ in page.queries] == ["link", "button"]


async def test_click_text_without_match():
    page = FakePlaywrightPage({"link": [FakeLocator("People", visible=False)]})
    assert not await RegistryPage(page).click_text("people")

"""Tests for section navigation."""
import pytest

from conftest import BASE, FakePage

from company_intel.errors import NavigationError
from company_intel.scraping.navigator import Navigator, is_on_section, section_url

COMPANY_URL = f"{BASE}/company/01234567"


def test_section_url_from_company_page():
    assert section_url(COMPANY_URL, "filing history") == f"{COMPANY_URL}/filing-history"


def test_section_url_strips_current_section_and_query():
    """Trailing section paths, query and fragment are removed before appending."""
    url = f"{COMPANY_URL}/filing-history?page=3#top"
    assert section_url(url, "people") == f"{COMPANY_URL}/officers"
    assert section_url(f"{COMPANY_URL}/officers", "charges") == f"{COMPANY_URL}/charges"


def test_section_url_unknown_section():
    assert section_url(COMPANY_URL, "insolvency") is None


def test_is_on_section_checks_url_and_title():
    assert is_on_section(f"{COMPANY_URL}/filing-history", "", "filing history")
    assert is_on_section(f"{COMPANY_URL}/officers", "ACME LIMITED people - Find and update", "people")
    assert not is_on_section(f"{COMPANY_URL}/officers", "ACME LIMITED", "charges")


async def test_action_strategy_used_first():
    """A successful semantic action needs no other strategy."""
    target = f"{COMPANY_URL}/filing-history"
    page = FakePage({}, act_handler=lambda instruction: target, start_url=COMPANY_URL)
    assert await Navigator(page).navigate_to_section("filing history") is True
    assert page.visits == [target]
    assert 'contains "filing history"' in page.actions[0]


async def test_falls_back_to_direct_url():
    """When the action finds nothing, the fixed section path is loaded."""
    page = FakePage({}, start_url=COMPANY_URL)
    await Navigator(page).navigate_to_section("charges")
    assert page.url == f"{COMPANY_URL}/charges"


async def test_falls_back_to_link_text():
    """An unknown section can still be reached by clicking its link text."""
    target = f"{COMPANY_URL}/insolvency"
    page = FakePage({}, text_links={"insolvency": target}, start_url=COMPANY_URL)
    await Navigator(page).navigate_to_section("Insolvency")
    assert page.url == target


async def test_action_landing_elsewhere_is_rejected():
    """An action that lands on the wrong page does not count as success."""
    page = FakePage({}, act_handler=lambda instruction: f"{BASE}/help", start_url=COMPANY_URL)
    await Navigator(page).navigate_to_section("filing history")
    assert page.url == f"{COMPANY_URL}/filing-history"


async def test_all_strategies_failing_raises():
    page = FakePage({}, start_url=COMPANY_URL)
    with pytest.raises(NavigationError, match="Failed to navigate to insolvency section"):
        await Navigator(page).navigate_to_section("insolvency")

"""Tests for officer parsing and the people extractor."""
from conftest import BASE, FakeLLM, FakePage
from pages import OFFICERS_HTML

from company_intel.parse.extractors.officers import classify_officer_link, parse_officers
from company_intel.scraping.people import PeopleExtractor

OFFICERS_URL = f"{BASE}/company/01234567/officers"


def test_parse_active_officer():
    """Every labelled field of an appointment card is captured."""
    officer = parse_officers(OFFICERS_HTML)[0]
    assert officer.name == "SMITH, John"
    assert officer.role == "Director"
    assert officer.status == "Active"
    assert officer.appointment_date == "1 January 2015"
    assert officer.date_of_birth == "March 1970"
    assert officer.nationality == "British"
    assert officer.country_of_residence == "England"
    assert officer.occupation == "Engineer"
    assert officer.address == "1 High Street, London, EC1A 1AA"
    assert officer.resignation_date is None
    assert officer.is_active


def test_parse_resigned_officer():
    """The status tag inside the role label does not leak into other fields."""
    officer = parse_officers(OFFICERS_HTML)[1]
    assert officer.role == "Secretary"
    assert officer.status == "Resigned"
    assert officer.resignation_date == "1 June 2018"
    assert not officer.is_active


def test_officer_links_are_absolute_profiles():
    link = parse_officers(OFFICERS_HTML)[0].links[0]
    assert link.url == f"{BASE}/officers/abc123/appointments"
    assert link.link_type == "profile"


def test_classify_officer_link():
    assert classify_officer_link("/officers/abc/appointments", in_heading=True) == "profile"
    assert classify_officer_link("/officers/abc/appointments") == "appointment"
    assert classify_officer_link("/officers/abc") == "profile"
    assert classify_officer_link("/help") == "other"


def test_parse_officers_empty_page():
    assert parse_officers("<html><body><p>No officers</p></body></html>") == []


async def test_people_extractor_prefers_dom():
    llm = FakeLLM()
    page = FakePage({OFFICERS_URL: OFFICERS_HTML}, llm=llm, start_url=OFFICERS_URL)
    officers = await PeopleExtractor(page).extract()
    assert [o.name for o in officers] == ["SMITH, John", "DOE, Jane"]
    assert llm.extract_calls == []


async def test_people_extractor_falls_back_to_llm():
    """Unrecognised markup is handed to the LLM."""
    llm = FakeLLM({
        "OfficersSchema": {
            "officers": [
                {"name": "BROWN, Alice", "role": "Director", "appointment_date": "2 May 2020",
                 "profile_url": "/officers/xyz/appointments"},
                {"name": "  ", "role": "Director"},
                {"name": "GREEN, Bob", "role": "Director", "resignation_date": "1 Jan 2021"},
            ]
        }
    })
    page = FakePage({OFFICERS_URL: "<html><body><table><tr><td>BROWN, Alice</td></tr></table></body></html>"},
                    llm=llm, start_url=OFFICERS_URL)
    officers = await PeopleExtractor(page).extract()
    assert [o.name for o in officers] == ["BROWN, Alice", "GREEN, Bob"]
    assert officers[0].links[0].url == f"{BASE}/officers/xyz/appointments"
    assert officers[0].status == "Active"
    assert officers[1].status == "Resigned"

"""Tests for overview, charges and search result parsing."""
from pages import CHARGES_HTML, NO_CHARGES_HTML, NO_RESULTS_HTML, OVERVIEW_HTML, SEARCH_HTML

from company_intel.parse.extractors.charges import has_no_charges_marker, parse_charges
from company_intel.parse.extractors.overview import parse_overview
from company_intel.parse.extractors.search import has_no_results_marker, parse_search_results


def test_parse_overview():
    """Headline fields and SIC codes come from the overview page."""
    overview = parse_overview(OVERVIEW_HTML)
    assert overview.company_name == "ACME WIDGETS LIMITED"
    assert overview.company_number == "01234567"
    assert overview.status == "Active"
    assert overview.company_type == "Private limited Company"
    assert overview.incorporation_date == "1 January 2010"
    assert overview.registered_address == "1 High Street, London, EC1A 1AA"
    assert [(s.code, s.description) for s in overview.sic_codes] == [
        ("62012", "Business and domestic software development")
    ]
    assert overview.nature_of_business.startswith("62012")


def test_parse_overview_without_name():
    assert parse_overview("<html><body><p>Nothing here</p></body></html>") is None
    assert parse_overview("") is None


def test_parse_charges():
    """Each mortgage block becomes a charge record."""
    charges = parse_charges(CHARGES_HTML)
    assert len(charges) == 2
    first, second = charges
    assert first.charge_code == "012345670001"
    assert first.created_date == "4 April 2023"
    assert first.delivered_date == "6 April 2023"
    assert first.status == "Outstanding"
    assert first.chargeholder == "Big Bank PLC"
    assert first.description == "Freehold property at 1 High Street"
    assert second.charge_code is None
    assert second.status.startswith("Satisfied")
    assert second.description == "All monies due"
    assert second.secured_amount == "All monies due or to become due"


def test_no_charges_marker():
    assert parse_charges(NO_CHARGES_HTML) == []
    assert has_no_charges_marker(NO_CHARGES_HTML)
    assert not has_no_charges_marker(CHARGES_HTML)


def test_parse_search_results():
    """Company links are returned in order with absolute URLs."""
    hits = parse_search_results(SEARCH_HTML)
    assert [h.company_number for h in hits] == ["01234567", "07654321"]
    assert hits[0].name == "ACME WIDGETS LIMITED"
    assert hits[0].url.endswith("/company/01234567")


def test_no_results_marker():
    assert parse_search_results(NO_RESULTS_HTML) == []
    assert has_no_results_marker(NO_RESULTS_HTML)
    assert not has_no_results_marker(SEARCH_HTML)


def test_result_counts_ending_in_zero_are_not_a_no_results_marker():
    html = "<html><body><p>10 results</p><ul><li>ACME HOLDINGS</li></ul></body></html>"
    assert not has_no_results_marker(html)
    assert has_no_results_marker("<html><body><p>0 results</p></body></html>")

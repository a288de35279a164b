"""Tests for the filing extraction strategies."""
from conftest import BASE, FakeLLM, FakePage, filing_table, pdf_link

from company_intel.errors import LLMError
from company_intel.scraping.filings import FilingExtractor, best_strategy

FILINGS_URL = f"{BASE}/company/01234567/filing-history"

LINKED_TABLE = filing_table([
    ("31 Dec 2023", "Micro-entity accounts made up to 31 December 2023", pdf_link("a1")),
    ("5 Mar 2023", "Confirmation statement made on 1 March 2023 with no updates", pdf_link("a2", 1)),
])

# Links rendered by script: the cell holds a button instead of a download anchor
UNLINKED_TABLE = filing_table([
    ("31 Dec 2023", "Micro-entity accounts made up to 31 December 2023", '<button data-doc="a1">View</button>'),
    ("5 Mar 2023", "Confirmation statement made on 1 March 2023", '<button data-doc="a2">View</button>'),
])

LLM_FILINGS = {
    "filings": [
        {
            "date": "31 Dec 2023",
            "description": "Micro-entity accounts made up to 31 December 2023",
            "document_links": [
                {"url": "/company/01234567/filing-history/a1/document?format=pdf", "text": "View PDF", "page_count": "4"},
                {"url": "https://elsewhere.example.com/doc.pdf", "text": "Mirror"},
            ],
        },
        {"date": "yesterday", "description": "Bogus row", "document_links": []},
    ]
}


def make_page(html: str, llm: FakeLLM | None = None) -> FakePage:
    return FakePage({FILINGS_URL: html}, llm=llm, start_url=FILINGS_URL)


async def test_dom_strategy_wins_when_links_present():
    """The DOM strategy result is used without any LLM call."""
    llm = FakeLLM()
    filings = await FilingExtractor(make_page(LINKED_TABLE, llm)).extract()
    assert len(filings) == 2
    assert filings[1].document_links[0].page_count == "1"
    assert llm.extract_calls == []


async def test_llm_strategy_when_dom_has_no_links():
    """Rows without links send extraction to the LLM, whose output is validated."""
    llm = FakeLLM({"FilingsSchema": LLM_FILINGS})
    filings = await FilingExtractor(make_page(UNLINKED_TABLE, llm)).extract()
    assert len(filings) == 1
    filing = filings[0]
    assert filing.type == "Micro Company Accounts"
    assert len(filing.document_links) == 1
    assert filing.document_links[0].url == f"{BASE}/company/01234567/filing-history/a1/document?format=pdf"
    assert filing.document_links[0].page_count == "4"


async def test_hybrid_strategy_after_llm_failure():
    """When full-page extraction fails, links are extracted row by row."""
    def link_cell(content: str):
        doc = "a1" if "a1" in content else "a2"
        return {"links": [{"url": f"/company/01234567/filing-history/{doc}/document?format=pdf", "text": "View PDF"}]}

    llm = FakeLLM({"FilingsSchema": LLMError("boom"), "LinkCellSchema": link_cell})
    filings = await FilingExtractor(make_page(UNLINKED_TABLE, llm)).extract()
    assert [len(f.document_links) for f in filings] == [1, 1]
    assert filings[1].document_links[0].url.endswith("/a2/document?format=pdf")


async def test_hybrid_row_failure_keeps_row_without_links():
    """A failing row keeps its date and description but no links."""
    def link_cell(content: str):
        if "a2" in content:
            raise LLMError("row failed")
        return {"links": [{"url": "/company/01234567/filing-history/a1/document?format=pdf", "text": "View"}]}

    llm = FakeLLM({"LinkCellSchema": link_cell})
    filings = await FilingExtractor(make_page(UNLINKED_TABLE, llm)).extract_with_hybrid()
    assert len(filings) == 2
    assert filings[1].document_links == []


async def test_hybrid_row_cap():
    """Rows past the cap are kept without an LLM call."""
    llm = FakeLLM({"LinkCellSchema": {"links": [{"url": "/document?format=pdf&doc=1", "text": "View"}]}})
    extractor = FilingExtractor(make_page(UNLINKED_TABLE, llm), hybrid_max_rows=1)
    filings = await extractor.extract_with_hybrid()
    assert len(filings) == 2
    assert len(llm.extract_calls) == 1
    assert filings[1].document_links == []


async def test_all_strategies_failing_returns_empty():
    """No strategy producing links yields an empty list, never an exception."""
    llm = FakeLLM({"FilingsSchema": LLMError("down"), "LinkCellSchema": {"links": []}})
    assert await FilingExtractor(make_page(UNLINKED_TABLE, llm)).extract() == []


async def test_compare_strategies_reports_each():
    """Comparison runs every strategy and picks the one with the most links."""
    llm = FakeLLM({"FilingsSchema": LLM_FILINGS, "LinkCellSchema": LLMError("nope")})
    comparison = await FilingExtractor(make_page(LINKED_TABLE, llm)).compare_strategies()
    strategies = comparison["strategies"]
    assert strategies["dom"]["links"] == 2
    assert strategies["llm"]["links"] == 1
    assert strategies["hybrid"]["links"] == 0
    assert len(strategies["dom"]["sampleUrls"]) == 2
    assert comparison["bestStrategy"] == "dom"


def test_best_strategy_tie_break_and_none():
    """Links decide first, then filings; no links at all means none."""
    assert best_strategy({"dom": {"links": 2, "filings": 2}, "llm": {"links": 2, "filings": 5}}) == "llm"
    assert best_strategy({"dom": {"links": 0, "filings": 9}}) == "none"
    assert best_strategy({}) == "none"

"""Shared fakes standing in for the browser page and the LLM client."""
from typing import Any, Callable, Optional

import pytest

from company_intel.config import config
from company_intel.errors import LLMError

BASE = config.REGISTRY_BASE_URL


class FakeLLM:
    """Returns canned payloads keyed by schema class name."""

    def __init__(self, responses: Optional[dict[str, Any]] = None, summary: Any = "Generated summary"):
        self.responses = responses or {}
        self.summary = summary
        self.extract_calls: list[tuple[str, str, str]] = []
        self.prompts: list[str] = []

    async def extract_structured(self, instruction, content, schema_cls):
        self.extract_calls.append((schema_cls.__name__, instruction, content))
        payload = self.responses.get(schema_cls.__name__)
        if callable(payload):
            payload = payload(content)
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            raise LLMError(f"no canned response for {schema_cls.__name__}")
        return schema_cls.model_validate(payload)

    async def generate(self, prompt, max_tokens=None, temperature=None):
        self.prompts.append(prompt)
        if isinstance(self.summary, Exception):
            raise self.summary
        return self.summary


class FakePage:
    """In-memory page: URLs map to HTML, selector and text clicks map to URLs."""

    def __init__(
        self,
        routes: dict[str, str],
        titles: Optional[dict[str, str]] = None,
        clicks: Optional[dict[str, str]] = None,
        text_links: Optional[dict[str, str]] = None,
        act_handler: Optional[Callable[[str], Optional[str]]] = None,
        llm: Optional[FakeLLM] = None,
        start_url: str = BASE,
    ):
        self.routes = routes
        self.titles = titles or {}
        self.clicks = clicks or {}
        self.text_links = text_links or {}
        self.act_handler = act_handler
        self.llm = llm or FakeLLM()
        self._url = start_url
        self.visits: list[str] = []
        self.actions: list[str] = []

    @property
    def url(self) -> str:
        return self._url

    async def goto(self, url: str) -> None:
        self._url = url
        self.visits.append(url)

    async def title(self) -> str:
        return self.titles.get(self._url, "")

    async def content(self) -> str:
        return self.routes.get(self._url, "<html><body></body></html>")

    async def wait_for_load(self, min_delay_ms=None) -> None:
        return None

    async def click_selector(self, selector: str) -> bool:
        target = self.clicks.get(selector)
        if target is None:
            return False
        await self.goto(target)
        return True

    async def click_text(self, text: str) -> bool:
        target = self.text_links.get(text.lower())
        if target is None:
            return False
        await self.goto(target)
        return True

    async def fill(self, selector: str, value: str) -> bool:
        return False

    async def press(self, selector: str, key: str) -> None:
        return None

    async def act(self, instruction: str) -> bool:
        self.actions.append(instruction)
        if self.act_handler is None:
            return False
        target = self.act_handler(instruction)
        if target is None:
            return False
        await self.goto(target)
        return True

    async def extract(self, instruction, schema_cls, html=None):
        source = html if html is not None else await self.content()
        return await self.llm.extract_structured(instruction, source, schema_cls)


class FakeSession:
    """Stands in for BrowserSession, yielding a prepared FakePage."""

    def __init__(self, page: FakePage):
        self.page = page

    def __call__(self, llm=None):
        self.page.llm = llm or self.page.llm
        return self

    async def __aenter__(self):
        return self.page

    async def __aexit__(self, exc_type, exc, tb):
        return None


def filing_table(rows: list[tuple[str, str, str]], with_type_column: bool = False) -> str:
    """Build an fhTable from (date, description, link cell html) rows."""
    header = "<tr><th>Date</th><th>Type</th><th>Description</th><th>View / Download</th></tr>" if with_type_column \
        else "<tr><th>Date</th><th>Description</th><th>View / Download</th></tr>"
    body = []
    for date, description, links in rows:
        if with_type_column:
            body.append(f"<tr><td>{date}</td><td>AA</td><td>{description}</td><td>{links}</td></tr>")
        else:
            body.append(f"<tr><td>{date}</td><td>{description}</td><td>{links}</td></tr>")
    return f'<html><body><table id="fhTable">{header}{"".join(body)}</table></body></html>'


def pdf_link(doc: str, pages: int = 3) -> str:
    return (
        f'<a class="download link-updater-js" href="/company/01234567/filing-history/{doc}/document?format=pdf&download=0">'
        f"View PDF ({pages} pages)</a>"
    )


@pytest.fixture
def fake_llm():
    return FakeLLM()

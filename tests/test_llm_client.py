"""Tests for the Anthropic client wrapper."""
from types import SimpleNamespace

import pytest

from company_intel.errors import LLMError
from company_intel.llm.client import EXTRACTION_TOOL, LLMClient
from company_intel.llm.schemas import FilingsSchema, LinkCellSchema


class FakeMessages:
    def __init__(self, response):
        self.response = response
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return self.response


def client_returning(*blocks) -> tuple[LLMClient, FakeMessages]:
    messages = FakeMessages(SimpleNamespace(content=list(blocks)))
    return LLMClient(model="test-model", client=SimpleNamespace(messages=messages)), messages


def tool_block(payload):
    return SimpleNamespace(type="tool_use", name=EXTRACTION_TOOL, input=payload)


async def test_extract_structured_forces_tool_call():
    payload = {"filings": [{"date": "31 Dec 2023", "description": "Accounts", "document_links": []}]}
    llm, messages = client_returning(tool_block(payload))
    data = await llm.extract_structured("Extract filings", "<table></table>", FilingsSchema)
    assert data.filings[0].date == "31 Dec 2023"
    assert messages.kwargs["tool_choice"] == {"type": "tool", "name": EXTRACTION_TOOL}
    assert messages.kwargs["model"] == "test-model"
    assert "<table></table>" in messages.kwargs["messages"][0]["content"]


async def test_extract_structured_accepts_json_string_input():
    llm, _ = client_returning(tool_block('{"links": [{"url": "/document?format=pdf", "text": "View"}]}'))
    data = await llm.extract_structured("Extract links", "<td></td>", LinkCellSchema)
    assert data.links[0].url == "/document?format=pdf"


async def test_extract_structured_without_tool_call_raises():
    llm, _ = client_returning(SimpleNamespace(type="text", text="I cannot help"))
    with pytest.raises(LLMError):
        await llm.extract_structured("Extract links", "<td></td>", LinkCellSchema)


async def test_extract_structured_invalid_payload_raises():
    llm, _ = client_returning(tool_block({"filings": [{"description": "no date"}]}))
    with pytest.raises(LLMError):
        await llm.extract_structured("Extract filings", "", FilingsSchema)


async def test_choose_action():
    llm, messages = client_returning(tool_block({"action": "click", "index": 2}))
    choice = await llm.choose_action("Click filing history", [{"index": 2, "tag": "a", "text": "Filing history"}])
    assert choice.action == "click"
    assert choice.index == 2
    assert "[2] <a> 'Filing history'" in messages.kwargs["messages"][0]["content"]


async def test_generate_joins_text_blocks():
    llm, _ = client_returning(SimpleNamespace(type="text", text="Part one. "), SimpleNamespace(type="text", text="Part two."))
    assert await llm.generate("prompt") == "Part one. Part two."


async def test_generate_empty_raises():
    llm, _ = client_returning()
    with pytest.raises(LLMError):
        await llm.generate("prompt")

"""Thin Anthropic client for structured extraction, element choice and text generation."""
import logging
from typing import Any, Optional, TypeVar

import anthropic
import orjson
from pydantic import BaseModel, ValidationError

from company_intel.config import config
from company_intel.errors import LLMError
from company_intel.llm.schemas import ActionSchema

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

EXTRACTION_TOOL = "record_extraction"
EXTRACTION_SYSTEM = (
    "You extract structured data from UK Companies House web pages. "
    "Only report values present in the supplied HTML. Never invent links or dates."
)
ACTION_SYSTEM = (
    "You operate a web page. Given an instruction and a numbered list of interactive "
    "elements, choose the single element that satisfies it, or 'none' if nothing fits."
)


class LLMClient:
    """Async wrapper around the Anthropic Messages API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client: Any = None):
        self.model = model or config.LLM_MODEL
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key or config.ANTHROPIC_API_KEY,
            timeout=config.LLM_TIMEOUT,
        )

    async def _create(self, **kwargs) -> Any:
        try:
            return await self.client.messages.create(model=self.model, **kwargs)
        except anthropic.APIError as e:
            raise LLMError(f"LLM request failed: {e}") from e

    async def extract_structured(self, instruction: str, content: str, schema_cls: type[SchemaT]) -> SchemaT:
        """Extract schema_cls from content by forcing a single tool call."""
        response = await self._create(
            max_tokens=config.LLM_MAX_TOKENS,
            temperature=config.LLM_TEMPERATURE,
            system=EXTRACTION_SYSTEM,
            tools=[
                {
                    "name": EXTRACTION_TOOL,
                    "description": "Record the extracted data.",
                    "input_schema": schema_cls.model_json_schema(),
                }
            ],
            tool_choice={"type": "tool", "name": EXTRACTION_TOOL},
            messages=[{"role": "user", "content": f"{instruction}\n\n<page>\n{content}\n</page>"}],
        )
        payload = _tool_input(response)
        if payload is None:
            raise LLMError("LLM returned no structured output")
        try:
            return schema_cls.model_validate(payload)
        except ValidationError as e:
            raise LLMError(f"LLM output did not match {schema_cls.__name__}: {e}") from e

    async def choose_action(self, instruction: str, elements: list[dict[str, Any]]) -> ActionSchema:
        """Pick the element (by index) that satisfies an instruction."""
        listing = "\n".join(
            f"[{el['index']}] <{el.get('tag', '')}> {el.get('text', '')!r} {el.get('hint', '')}".rstrip()
            for el in elements
        )
        response = await self._create(
            max_tokens=256,
            temperature=0,
            system=ACTION_SYSTEM,
            tools=[
                {
                    "name": EXTRACTION_TOOL,
                    "description": "Record the chosen action.",
                    "input_schema": ActionSchema.model_json_schema(),
                }
            ],
            tool_choice={"type": "tool", "name": EXTRACTION_TOOL},
            messages=[{"role": "user", "content": f"Instruction: {instruction}\n\nElements:\n{listing}"}],
        )
        payload = _tool_input(response)
        if payload is None:
            raise LLMError("LLM returned no action")
        try:
            return ActionSchema.model_validate(payload)
        except ValidationError as e:
            raise LLMError(f"LLM action was malformed: {e}") from e

    async def generate(self, prompt: str, max_tokens: Optional[int] = None, temperature: Optional[float] = None) -> str:
        """Free-text completion."""
        response = await self._create(
            max_tokens=max_tokens or config.SUMMARY_MAX_TOKENS,
            temperature=config.SUMMARY_TEMPERATURE if temperature is None else temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(
            getattr(block, "text", "") for block in response.content if getattr(block, "type", "") == "text"
        ).strip()
        if not text:
            raise LLMError("LLM returned an empty completion")
        return text


def _tool_input(response: Any) -> Optional[dict[str, Any]]:
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", "") == "tool_use":
            payload = block.input
            if isinstance(payload, str):
                try:
                    payload = orjson.loads(payload)
                except orjson.JSONDecodeError:
                    logger.warning("Tool input was not valid JSON")
                    return None
            return payload
    return None

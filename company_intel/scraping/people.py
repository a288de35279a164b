"""Officer extraction with DOM and LLM strategies."""
import logging

from company_intel.llm.schemas import OfficersSchema
from company_intel.parse.extractors.officers import parse_officers
from company_intel.parse.html_parser import absolutize_url, normalize_text
from company_intel.parse.models import OfficerLink, OfficerRecord
from company_intel.scraping.strategies import run_strategies

logger = logging.getLogger(__name__)

OFFICERS_INSTRUCTION = (
    "Extract every officer listed on this page: full name, role, appointment date, "
    "resignation date if resigned, nationality, occupation, correspondence address, "
    "date of birth, country of residence and the href of the officer's name link."
)


def has_named_officer(officers: list[OfficerRecord]) -> bool:
    return any(o.name for o in officers or [])


class PeopleExtractor:
    def __init__(self, page):
        self.page = page

    async def extract_with_dom(self) -> list[OfficerRecord]:
        return parse_officers(await self.page.content())

    async def extract_with_llm(self) -> list[OfficerRecord]:
        data = await self.page.extract(OFFICERS_INSTRUCTION, OfficersSchema)
        officers = []
        for item in data.officers:
            name = normalize_text(item.name)
            if not name:
                continue
            links = []
            if item.profile_url:
                url = absolutize_url(item.profile_url)
                links.append(OfficerLink(link_text=name, url=url, link_type="profile"))
            fields = item.model_dump(exclude={"name", "profile_url"})
            officers.append(
                OfficerRecord(
                    name=name,
                    status="Resigned" if item.resignation_date else "Active",
                    links=links,
                    **fields,
                )
            )
        return officers

    async def extract(self) -> list[OfficerRecord]:
        """Officers from the first strategy that yields a named officer, else []."""
        name, officers = await run_strategies(
            [("dom", self.extract_with_dom), ("llm", self.extract_with_llm)],
            has_named_officer,
            label="People",
        )
        return officers if name is not None else []

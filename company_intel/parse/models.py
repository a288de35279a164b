"""Data models for extracted company records."""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class DocumentLink(RecordModel):
    """Link to one document of a filing."""

    link_text: str
    link_type: str = Field(..., description="PDF, iXBRL or XML")
    url: str = Field(..., description="Absolute URL on the registry origin")
    page_count: Optional[str] = None


class FilingRecord(RecordModel):
    """One row of the filing history."""

    date: str
    description: str
    type: str
    status: str = "Filed"
    document_links: list[DocumentLink] = Field(default_factory=list)
    filing_code: Optional[str] = None


class OfficerLink(RecordModel):
    link_text: str
    url: str
    link_type: str = Field(..., description="profile, appointment or other")


class OfficerRecord(RecordModel):
    """One officer appointment."""

    name: str
    role: str = ""
    status: Optional[str] = None
    appointment_date: Optional[str] = None
    resignation_date: Optional[str] = None
    nationality: Optional[str] = None
    occupation: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[str] = None
    country_of_residence: Optional[str] = None
    links: list[OfficerLink] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return not self.resignation_date


class ChargeRecord(RecordModel):
    charge_code: Optional[str] = None
    description: str = ""
    status: str = ""
    created_date: Optional[str] = None
    delivered_date: Optional[str] = None
    chargeholder: Optional[str] = None
    secured_amount: Optional[str] = None


class SicCode(RecordModel):
    code: str
    description: str = ""


class CompanyOverview(RecordModel):
    """Headline details from the company overview page."""

    company_name: Optional[str] = None
    company_number: Optional[str] = None
    status: Optional[str] = None
    incorporation_date: Optional[str] = None
    company_type: Optional[str] = None
    registered_address: Optional[str] = None
    nature_of_business: Optional[str] = None
    sic_codes: list[SicCode] = Field(default_factory=list)


class FilingStatistics(RecordModel):
    total_filings: int = 0
    filings_with_documents: int = 0
    total_document_pages: int = 0
    document_success_rate: int = 0
    filing_types: dict[str, int] = Field(default_factory=dict)


class DateRange(RecordModel):
    earliest: str
    latest: str


class FilingSection(RecordModel):
    filings: list[FilingRecord] = Field(default_factory=list)
    total_filings: int = 0
    pages_scraped: int = 0
    statistics: FilingStatistics = Field(default_factory=FilingStatistics)
    date_range: Optional[DateRange] = None


class PeopleSection(RecordModel):
    officers: list[OfficerRecord] = Field(default_factory=list)
    total_officers: int = 0
    active_officers: int = 0
    pages_scraped: int = 0


class ChargesSection(RecordModel):
    charges: list[ChargeRecord] = Field(default_factory=list)
    total_charges: int = 0


class ScrapingResult(RecordModel):
    """Root aggregate built up by one scrape request."""

    query: str
    extraction_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    quality_score: int = 0
    data_issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    overview: Optional[CompanyOverview] = None
    filing: Optional[FilingSection] = None
    people: Optional[PeopleSection] = None
    charges: Optional[ChargesSection] = None


class CompanyReport(RecordModel):
    """Scraping result plus the narrative produced from it."""

    result: ScrapingResult
    summary: str = ""
    summary_generated: bool = False
    quality_report: str = ""
    duration_ms: int = 0

"""Schemas handed to the LLM for structured extraction."""
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ExtractedLink(BaseModel):
    url: str = Field(..., description="href of the document link exactly as it appears")
    text: str = Field("", description="visible link text")
    page_count: Optional[str] = Field(None, description="N from a '(N pages)' marker, if any")


class ExtractedFiling(BaseModel):
    date: str = Field(..., description="filing date as shown, e.g. '31 Dec 2023'")
    description: str
    document_links: list[ExtractedLink] = Field(default_factory=list)


class FilingsSchema(BaseModel):
    filings: list[ExtractedFiling] = Field(default_factory=list)


class LinkCellSchema(BaseModel):
    links: list[ExtractedLink] = Field(default_factory=list)


class ExtractedOfficer(BaseModel):
    name: str
    role: str = ""
    appointment_date: Optional[str] = None
    resignation_date: Optional[str] = None
    nationality: Optional[str] = None
    occupation: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[str] = None
    country_of_residence: Optional[str] = None
    profile_url: Optional[str] = None


class OfficersSchema(BaseModel):
    officers: list[ExtractedOfficer] = Field(default_factory=list)


class ExtractedCharge(BaseModel):
    charge_code: Optional[str] = None
    description: str = ""
    status: str = ""
    created_date: Optional[str] = None
    delivered_date: Optional[str] = None
    chargeholder: Optional[str] = None
    secured_amount: Optional[str] = None


class ChargesSchema(BaseModel):
    charges: list[ExtractedCharge] = Field(default_factory=list)
    no_charges: bool = Field(False, description="true if the page says no charges are registered")


class OverviewSchema(BaseModel):
    company_name: Optional[str] = None
    company_number: Optional[str] = None
    status: Optional[str] = None
    incorporation_date: Optional[str] = None
    company_type: Optional[str] = None
    registered_address: Optional[str] = None
    nature_of_business: Optional[str] = None


class ActionSchema(BaseModel):
    """Element the model picked to satisfy a page instruction."""

    action: Literal["click", "fill", "none"]
    index: Optional[int] = Field(None, description="index of the chosen element")
    value: Optional[str] = Field(None, description="text to type for a fill action")

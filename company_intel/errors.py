"""Exception hierarchy and user-facing error classification."""
from dataclasses import dataclass


class ScraperError(Exception):
    """Base class for scraper errors."""


class NavigationError(ScraperError):
    """All navigation strategies for a section were exhausted."""


class ExtractionError(ScraperError):
    """An extraction strategy could not produce records."""


class LLMError(ScraperError):
    """The LLM provider failed or returned unusable output."""


class CompanySearchError(ScraperError):
    """Searching for or selecting the company failed."""


class CompanyNotFoundError(CompanySearchError):
    """The registry search returned no matching company."""


RATE_LIMIT_MARKERS = ("rate limit", "too many requests", "status 429", "429 too many")


@dataclass
class ErrorClassification:
    """HTTP status, machine code and message shown to the user."""

    status_code: int
    error_code: str
    user_message: str


def classify_error(error: BaseException, company: str) -> ErrorClassification:
    """Map a fatal scraping error to a user-facing classification."""
    message = str(error).lower()

    if isinstance(error, CompanyNotFoundError) or "no companies found" in message or "not found" in message:
        return ErrorClassification(
            status_code=404,
            error_code="COMPANY_NOT_FOUND",
            user_message=f'No company found with the name "{company}". Please check the spelling and try again.',
        )
    if isinstance(error, TimeoutError) or "timeout" in message or "network" in message or "net::" in message:
        return ErrorClassification(
            status_code=502,
            error_code="NETWORK_ERROR",
            user_message="Unable to connect to Companies House. Please try again later.",
        )
    if any(marker in message for marker in RATE_LIMIT_MARKERS):
        return ErrorClassification(
            status_code=429,
            error_code="RATE_LIMIT",
            user_message="Too many requests. Please wait a moment and try again.",
        )
    return ErrorClassification(
        status_code=500,
        error_code="INTERNAL_ERROR",
        user_message="An internal error occurred while processing your request",
    )

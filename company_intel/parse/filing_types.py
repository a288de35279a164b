"""Filing type categorization from the filing description."""

# Ordered rules, first match wins: (all substrings required, resulting type)
FILING_TYPE_RULES: list[tuple[tuple[str, ...], str]] = [
    (("confirmation statement",), "Confirmation Statement"),
    (("annual return",), "Annual Return"),
    (("accounts", "micro"), "Micro Company Accounts"),
    (("accounts", "small"), "Small Company Accounts"),
    (("accounts", "dormant"), "Dormant Company Accounts"),
    (("accounts",), "Company Accounts"),
    (("incorporation",), "Incorporation"),
    (("appointment",), "Officer Appointment"),
    (("termination",), "Officer Termination"),
    (("resignation",), "Officer Termination"),
    (("change", "details"), "Officer Details Change"),
    (("resolution",), "Resolution"),
    (("charge",), "Charge Registration"),
]

DEFAULT_FILING_TYPE = "Other"


def categorize_filing_type(description: str | None) -> str:
    """Map a filing description to its category."""
    desc = (description or "").lower()
    for needles, filing_type in FILING_TYPE_RULES:
        if all(needle in desc for needle in needles):
            return filing_type
    return DEFAULT_FILING_TYPE


def is_accounts_type(filing_type: str) -> bool:
    return filing_type.endswith("Accounts")

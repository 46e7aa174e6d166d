"""
Customer, claim, insurer and vehicle extraction from the page-1 text.

The page text is a flattened stream of text fragments, so every field is
anchored on its printed label. Each field owns an ordered list of strategies
(text -> value or None); the first strategy returning a non-empty value wins.
"""

import re
from typing import Callable, Optional
from loguru import logger
from ..estimate_types import IdentityFields, VehicleInfo
from ..normalizer import optional_text, sanitize_text

Strategy = Callable[[str], Optional[str]]

INSURANCE_LABEL = "insurance company:"

# Carriers that commonly print without the word INSURANCE
KNOWN_INSURERS = [
    "STATE FARM", "GEICO", "ALLSTATE", "PROGRESSIVE", "FARMERS",
    "LIBERTY MUTUAL", "USAA", "NATIONWIDE", "TRAVELERS", "AMERICAN FAMILY",
    "AUTO CLUB", "MEEMIC", "BRISTOL WEST", "ESURANCE", "SAFECO",
]

# Tokens that sit between the label and the carrier name in the flattened
# layout: owner/contact names, section words, state codes, numbers, phone parts
NON_COMPANY_TOKEN_RE = re.compile(
    r"^(WAGNER|MERILYN|OTHER|TROY|VEHICLE|INSPECTION|LOCATION|OWNER|HOME|BUSINESS"
    r"|\d+|[A-Z]{2}|\([^)]*\))$",
    re.IGNORECASE,
)
COMPANY_TOKEN_RE = re.compile(r"^[A-Z][A-Z\-]*$", re.IGNORECASE)
MAX_COMPANY_TOKENS = 4

_TRAILING_ADDRESS_RE = re.compile(
    r"\s+(AVENUE|AVE|STREET|ST|DRIVE|DR|BLVD|BOULEVARD|ROAD|RD|LANE|LN|CIRCLE|CIR"
    r"|COURT|CT|PLACE|PL)\b.*$",
    re.IGNORECASE,
)
_TRAILING_DIGITS_RE = re.compile(r"\s+\d+.*$")
_TRAILING_PHONE_RE = re.compile(r"\s+\([0-9].*$")
_TRAILING_BUSINESS_RE = re.compile(r"\s+Business\s*$", re.IGNORECASE)


def regex_strategy(pattern: str, group: int = 1) -> Strategy:
    compiled = re.compile(pattern, re.IGNORECASE)

    def run(text: str) -> Optional[str]:
        match = compiled.search(text)
        return match.group(group).strip() if match else None

    return run


def first_match(text: str, strategies: list[Strategy]) -> Optional[str]:
    for strategy in strategies:
        value = strategy(text)
        if value:
            return value
    return None


# ---------------------------------------------------------------------------
# Insurance company
# ---------------------------------------------------------------------------

def text_after_insurance_label(text: str) -> Optional[str]:
    index = text.lower().find(INSURANCE_LABEL)
    if index == -1:
        return None
    return text[index + len(INSURANCE_LABEL):].strip()


def insurer_by_keyword(after_label: str) -> Optional[str]:
    """Strategy A: a run of letters, spaces and hyphens containing INSURANCE."""
    match = re.search(r"([A-Z\-\s]+INSURANCE[A-Z\s]*)", after_label, re.IGNORECASE)
    return match.group(1).strip() if match else None


def insurer_by_known_name(after_label: str) -> Optional[str]:
    """Strategy B: first entry of KNOWN_INSURERS contained in the text."""
    upper = after_label.upper()
    for insurer in KNOWN_INSURERS:
        if insurer in upper:
            return insurer
    return None


def insurer_by_token_walk(after_label: str) -> Optional[str]:
    """
    Strategy C: collect the first run of capitalized alphabetic tokens.

    Denylisted tokens are skipped until a candidate starts; after that any
    non-matching token ends the run, as does reaching MAX_COMPANY_TOKENS.
    """
    candidate = []
    for raw in after_label.split():
        word = re.sub(r"[,.:;]", "", raw.strip())

        if NON_COMPANY_TOKEN_RE.match(word):
            if candidate:
                break
            continue

        if COMPANY_TOKEN_RE.match(word) and len(word) > 1:
            candidate.append(word.upper())
            if len(candidate) >= MAX_COMPANY_TOKENS:
                break
        elif candidate:
            break

    return " ".join(candidate) if candidate else None


INSURER_STRATEGIES: list[Strategy] = [
    insurer_by_keyword,
    insurer_by_known_name,
    insurer_by_token_walk,
]


def clean_company_name(name: str) -> str:
    """Drop trailing address, digit runs, phone numbers and a trailing 'Business'."""
    name = _TRAILING_ADDRESS_RE.sub("", name)
    name = _TRAILING_DIGITS_RE.sub("", name)
    name = _TRAILING_PHONE_RE.sub("", name)
    name = _TRAILING_BUSINESS_RE.sub("", name)
    return name.strip()


def extract_insurance_company(text: str) -> str:
    after_label = text_after_insurance_label(text)
    if after_label is None:
        logger.debug('"Insurance Company:" label not found in text')
        return ""

    for strategy in INSURER_STRATEGIES:
        name = strategy(after_label)
        if name:
            cleaned = sanitize_text(clean_company_name(name))
            logger.debug("Insurance company found", strategy=strategy.__name__, value=cleaned)
            return cleaned

    logger.debug("No insurance company found with any strategy")
    return ""


# ---------------------------------------------------------------------------
# Field tables
# ---------------------------------------------------------------------------

_NAME_END = r"(?=\s+Job\s+Number|\s+Written|$)"

CUSTOMER_NAME_STRATEGIES: list[Strategy] = [
    regex_strategy(r"Customer\s+Name\s+([A-Z\s,]+?)" + _NAME_END),
    regex_strategy(r"Customer\s+Name\s*\n?\s*([A-Z\s,]+?)" + _NAME_END),
    regex_strategy(r"Customer:\s*([A-Z\s,]+?)" + _NAME_END),
]

JOB_NUMBER_STRATEGIES: list[Strategy] = [
    regex_strategy(r"Job\s+Number:\s*(\d+)"),
]

CLAIM_NUMBER_STRATEGIES: list[Strategy] = [
    regex_strategy(r"Claim\s*#:\s*([A-Z0-9\-]+)"),
]

VEHICLE_YEAR_STRATEGIES: list[Strategy] = [
    regex_strategy(r"VEHICLE\s+(\d{4})"),
]

VEHICLE_MAKE_STRATEGIES: list[Strategy] = [
    regex_strategy(r"VEHICLE\s+\d{4}\s+([A-Z]+)"),
]

VEHICLE_MODEL_STRATEGIES: list[Strategy] = [
    regex_strategy(r"VEHICLE\s+\d{4}\s+[A-Z]+\s+([A-Z0-9\s]+?)(?=\s+Elevation|\s+Crew|\s+VIN|$)"),
]

VIN_STRATEGIES: list[Strategy] = [
    regex_strategy(r"VIN:\s*([A-Z0-9]{17})(?![A-Z0-9])"),
]


def extract_identity(identity_text: str) -> IdentityFields:
    """Pull the customer, claim, insurer and vehicle fields out of page-1 text."""
    text = identity_text or ""
    logger.debug("Parsing page 1 for customer/vehicle info", length=len(text))

    fields = IdentityFields(
        customer_name=sanitize_text(first_match(text, CUSTOMER_NAME_STRATEGIES)),
        job_number=optional_text(first_match(text, JOB_NUMBER_STRATEGIES)),
        claim_number=sanitize_text(first_match(text, CLAIM_NUMBER_STRATEGIES)),
        insurance_company=extract_insurance_company(text),
        vehicle=VehicleInfo(
            year=optional_text(first_match(text, VEHICLE_YEAR_STRATEGIES)),
            make=optional_text(first_match(text, VEHICLE_MAKE_STRATEGIES)),
            model=optional_text(first_match(text, VEHICLE_MODEL_STRATEGIES)),
            vin=optional_text(first_match(text, VIN_STRATEGIES)),
        ),
    )

    logger.debug(
        "Identity fields extracted",
        customer=fields.customer_name,
        job_number=fields.job_number,
        claim_number=fields.claim_number,
        insurance_company=fields.insurance_company,
    )
    return fields

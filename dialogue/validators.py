"""Slot validation for the information-collection step.

Each validator takes the user's (normalized) text and returns the value to
store, or raises ValidationFailure carrying the message key to re-prompt
with.  Nothing is written to the session here.
"""

from __future__ import annotations

import re
from datetime import date

from dialogue.commands import match_choice
from dialogue.errors import ValidationFailure
from dialogue.formatting import weekday_name
from dialogue.models.session import Language
from dialogue.normalize import to_ascii_digits

_NAME_LABEL = re.compile(r"^\s*(?:full\s+name|name|my\s+name\s+is|नाव)\s*[:\-]?\s*", re.IGNORECASE)
_PHONE_LABEL = re.compile(
    r"^\s*(?:phone|mobile|mob|contact|फोन|मोबाईल)\s*(?:no\.?|number|नंबर)?\s*[:\-]?\s*",
    re.IGNORECASE,
)
_TIME_LABEL = re.compile(r"^\s*(?:time|date|वेळ|तारीख)\s*[:\-]\s*", re.IGNORECASE)
_PHONE_SEPARATORS = re.compile(r"[\s\-().]")
_DIGIT_RUN = re.compile(r"\d+")
_DATE = re.compile(r"(?<!\d)(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})(?!\d)")

# Stored values are English regardless of the conversation language, since
# they end up in the agent alert and the CRM sheet.
REQUIREMENT_CHOICES: dict[int, str] = {
    1: "No special requirements",
    2: "Needs information about financing options",
    3: "Interested in nearby amenities",
    4: "Wants to discuss renovation possibilities",
}
OTHER_REQUIREMENT = 5

_REQUIREMENT_SYNONYMS: dict[int, tuple[str, ...]] = {
    1: ("none", "no", "nothing", "no requirements", "काही नाही", "नाही"),
    2: ("financing", "finance", "loan", "कर्ज", "वित्तपुरवठा"),
    3: ("amenities", "nearby", "सुविधा"),
    4: ("renovation", "renovate", "नूतनीकरण"),
    5: ("other", "इतर"),
}


def validate_name(text: str, min_length: int = 2) -> str:
    name = _NAME_LABEL.sub("", text, count=1).strip()
    if len(name) < min_length or not any(ch.isalpha() for ch in name):
        raise ValidationFailure("name", "invalid_name")
    return name


def _to_ten_digits(run: str) -> str | None:
    if len(run) == 10:
        return run
    if len(run) == 12 and run.startswith("91"):
        return run[2:]
    if len(run) == 11 and run.startswith("0"):
        return run[1:]
    return None


def validate_phone(text: str) -> str:
    """Extract exactly one 10-digit mobile number.

    Numerals in any script are accepted, separators inside the number are
    ignored and a ``+91`` / ``91`` / ``0`` prefix is dropped.  Zero or
    several candidate numbers fail.
    """
    value = _PHONE_LABEL.sub("", to_ascii_digits(text), count=1)
    value = _PHONE_SEPARATORS.sub("", value)
    candidates = [
        digits
        for digits in (_to_ten_digits(run) for run in _DIGIT_RUN.findall(value))
        if digits is not None
    ]
    if len(candidates) != 1:
        raise ValidationFailure("phone", "invalid_phone")
    return candidates[0]


def validate_preferred_time(text: str, language: Language = Language.ENGLISH) -> str:
    """Keep the user's wording; append the weekday when a D/M/YYYY date is present."""
    value = _TIME_LABEL.sub("", text, count=1).strip()
    if not value:
        raise ValidationFailure("preferred_time_raw", "invalid_time")

    match = _DATE.search(to_ascii_digits(value))
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            visit_day = date(year, month, day)
        except ValueError:
            return value
        return f"{value} ({weekday_name(visit_day, language)})"
    return value


def parse_requirement_choice(text: str) -> int:
    """Return the requirement menu choice (1-5)."""
    choice = match_choice(text, _REQUIREMENT_SYNONYMS)
    if choice is None:
        raise ValidationFailure("special_requirements", "ask_requirements")
    return choice


def validate_freeform_requirement(text: str) -> str:
    value = text.strip()
    if not value:
        raise ValidationFailure("special_requirements", "invalid_requirement_details")
    return value

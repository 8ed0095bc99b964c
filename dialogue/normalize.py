"""Input normalization applied to every inbound message before interpretation.

Numerals in any script (Devanagari ``९८७६``, Arabic-Indic, ...) become ASCII
digits, markup characters are dropped and whitespace is collapsed.  Two views
are kept: ``raw`` preserves the user's casing for slots that are stored
verbatim (name, preferred time, free-text requirements) and ``text`` is the
case-folded form used for menu and command matching.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

MAX_INPUT_LENGTH = 500

_WHITESPACE = re.compile(r"\s+")


def to_ascii_digits(value: str) -> str:
    """Replace every Unicode decimal digit with its ASCII equivalent."""
    out = []
    for ch in value:
        if ch.isdecimal() and not ("0" <= ch <= "9"):
            out.append(str(unicodedata.decimal(ch)))
        else:
            out.append(ch)
    return "".join(out)


@dataclass(frozen=True)
class NormalizedInput:
    raw: str
    text: str

    @property
    def is_empty(self) -> bool:
        return not self.text


def normalize(message: str | None) -> NormalizedInput:
    if not message:
        return NormalizedInput(raw="", text="")
    cleaned = to_ascii_digits(message)
    cleaned = cleaned.replace("<", "").replace(">", "")
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()[:MAX_INPUT_LENGTH]
    return NormalizedInput(raw=cleaned, text=cleaned.casefold())

"""Global command vocabulary and menu-choice matching (English + Marathi)."""

from __future__ import annotations

import re
from enum import Enum
from typing import Mapping, Optional, Sequence


class Command(str, Enum):
    RESTART = "restart"
    CHANGE_LANGUAGE = "change_language"
    HELP = "help"
    END = "end"


# Whole-message synonyms, matched against the normalized (case-folded) text.
COMMAND_SYNONYMS: dict[Command, frozenset[str]] = {
    Command.RESTART: frozenset({
        "hi", "hii", "hello", "hey", "start", "restart", "start over",
        "new search", "नमस्कार", "नमस्ते", "हाय", "पुन्हा सुरू करा", "नवीन शोध",
    }),
    Command.CHANGE_LANGUAGE: frozenset({
        "change language", "language", "change lang", "भाषा", "भाषा बदला",
    }),
    Command.HELP: frozenset({"help", "?", "मदत"}),
    Command.END: frozenset({
        "end", "bye", "goodbye", "exit", "quit", "समाप्त", "बंद", "थांबा",
    }),
}

_EDGE_PUNCTUATION = ".!,;:"
_TOKEN_SPLIT = re.compile(r"[\s,.!?;:()]+")
_DIGIT_CHOICE = re.compile(r"^(\d{1,2})[.)]?$")


def classify_command(text: str) -> Optional[Command]:
    """Return the global command ``text`` spells out, if any."""
    candidate = text.strip().strip(_EDGE_PUNCTUATION).strip()
    if not candidate:
        return None
    for command, synonyms in COMMAND_SYNONYMS.items():
        if candidate in synonyms:
            return command
    return None


def parse_index(text: str) -> Optional[int]:
    """Parse a bare menu number such as ``"2"``, ``"2."`` or ``"2)"``."""
    match = _DIGIT_CHOICE.match(text.strip())
    return int(match.group(1)) if match else None


def _tokens(text: str) -> list[str]:
    return [t for t in _TOKEN_SPLIT.split(text) if t]


def _contains_phrase(tokens: Sequence[str], phrase: str) -> bool:
    target = _tokens(phrase)
    if not target:
        return False
    width = len(target)
    return any(list(tokens[i:i + width]) == target for i in range(len(tokens) - width + 1))


def match_choice(text: str, options: Mapping[int, Sequence[str]]) -> Optional[int]:
    """Map user input onto one of ``options`` (choice number -> synonyms).

    Exact digit match wins; otherwise a choice is picked only when exactly
    one choice has a synonym present in the message.  Anything else is
    ambiguous and returns None so the caller re-prompts.
    """
    index = parse_index(text)
    if index is not None:
        return index if index in options else None

    tokens = _tokens(text)
    hits = {
        choice
        for choice, synonyms in options.items()
        if any(_contains_phrase(tokens, s) for s in synonyms)
    }
    if len(hits) == 1:
        return hits.pop()
    return None

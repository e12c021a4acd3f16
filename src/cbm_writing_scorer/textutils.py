from __future__ import annotations

import re
import unicodedata
from typing import List, Tuple

TERMINALS = frozenset({".", "!", "?"})
ESSENTIAL_PUNCT = frozenset({".", "!", "?", ":", ";"})
NON_ESSENTIAL_PUNCT = frozenset({",", ";", ":", "—", "–", "-", "…"})
OPENERS = frozenset({'"', "“", "'", "‘", "(", "[", "{", "«"})
CLOSERS = frozenset({'"', "”", "'", "’", ")", "]", "}", "»"})

PARAGRAPH_BREAK_RE = re.compile(r"\r?\n")


def normalize_word(value: str) -> str:
    """Fold a word into the form used for dictionary lookups."""
    normalized = unicodedata.normalize("NFKC", value)
    normalized = normalized.replace("’", "'").replace("‘", "'")
    return normalized.lower()


def is_capitalized(value: str) -> bool:
    if not value:
        return False
    return unicodedata.normalize("NFKC", value)[0].isupper()


def is_numeral(value: str) -> bool:
    """True for pure digit runs such as ``3`` or ``1999``."""
    return value.isdigit()


def differs_only_by_case(original: str, replacement: str) -> bool:
    return bool(original) and original != replacement and original.lower() == replacement.lower()


def paragraph_spans(text: str) -> List[Tuple[int, int]]:
    """Return (start, end) character spans of newline-delimited paragraphs."""
    spans: List[Tuple[int, int]] = []
    start = 0
    for match in PARAGRAPH_BREAK_RE.finditer(text):
        spans.append((start, match.start()))
        start = match.end()
    spans.append((start, len(text)))
    return spans


def utf16_to_index(text: str, offset: int) -> int:
    """
    Convert a UTF-16 code-unit offset (what JavaScript and Java services
    report) into a Python string index.
    """
    if offset <= 0:
        return 0
    units = 0
    for idx, ch in enumerate(text):
        if units >= offset:
            return idx
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(text)


def has_astral_chars(text: str) -> bool:
    return any(ord(ch) > 0xFFFF for ch in text)

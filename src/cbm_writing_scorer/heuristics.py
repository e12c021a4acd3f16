"""
Fallback detection of missing sentence-ending punctuation.

Two passes run over the token stream:

- ``word ^ CapitalWord``: a capitalized word directly after a word usually
  starts a new sentence, unless it opens a TitleCase run ("The Terrible
  Day"), follows a known abbreviation, or is the pronoun "I".
- paragraph ends: a paragraph whose last word is not followed by a
  terminal mark gets a proposal, except the final paragraph of the text.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from typing import AbstractSet, Iterable, List, Sequence, Tuple

from .dictionaries import DEFAULT_ABBREVIATIONS, DEFAULT_PROPER_NOUNS, PRONOUN_I_FORMS
from .models import InsertionReason, Token, VirtualTerminalInsertion
from .textutils import TERMINALS, is_capitalized, paragraph_spans

logger = logging.getLogger(__name__)

CAPITAL_MESSAGE = "Possible missing sentence-ending punctuation before a capitalized word."
PARAGRAPH_MESSAGE = "Paragraph ends without sentence-ending punctuation."


def detect_missing_terminals(
    text: str,
    tokens: Sequence[Token],
    *,
    proposed: Iterable[int] = (),
    abbreviations: AbstractSet[str] = DEFAULT_ABBREVIATIONS,
    proper_nouns: AbstractSet[str] = DEFAULT_PROPER_NOUNS,
    capital_pass: bool = True,
    paragraph_pass: bool = True,
) -> List[VirtualTerminalInsertion]:
    """Return heuristic terminal proposals; boundaries in ``proposed`` are skipped."""
    taken = set(proposed)
    out: List[VirtualTerminalInsertion] = []
    if not tokens:
        return out

    def add(boundary: int, reason: InsertionReason, message: str, at: int) -> None:
        if boundary in taken or boundary <= 0 or boundary >= len(tokens):
            return
        taken.add(boundary)
        out.append(
            VirtualTerminalInsertion(
                before_b_index=boundary, char=".", reason=reason, message=message, at=at
            )
        )

    if capital_pass:
        for left_idx in _capital_after_space(text, tokens, abbreviations, proper_nouns):
            add(left_idx + 1, InsertionReason.CAPITAL_AFTER_SPACE, CAPITAL_MESSAGE, tokens[left_idx].end)
    if paragraph_pass:
        for last_word in _unterminated_paragraph_ends(text, tokens):
            add(last_word + 1, InsertionReason.PARAGRAPH_END, PARAGRAPH_MESSAGE, tokens[last_word].end)

    out.sort(key=lambda ins: ins.before_b_index)
    logger.debug("Heuristics proposed %d terminal insertions", len(out))
    return out


def merge_insertions(
    primary: Iterable[VirtualTerminalInsertion],
    fallback: Iterable[VirtualTerminalInsertion],
) -> List[VirtualTerminalInsertion]:
    """Keep every primary proposal; add fallback ones only at free boundaries."""
    merged: dict[int, VirtualTerminalInsertion] = {}
    for insertion in list(primary) + list(fallback):
        merged.setdefault(insertion.before_b_index, insertion)
    return [merged[key] for key in sorted(merged)]


def _capital_after_space(
    text: str,
    tokens: Sequence[Token],
    abbreviations: AbstractSet[str],
    proper_nouns: AbstractSet[str],
) -> List[int]:
    hits: List[int] = []
    for idx in range(len(tokens) - 1):
        left = tokens[idx]
        right = tokens[idx + 1]
        # Any punctuation between the two words blocks the pair.
        if not left.is_word or not right.is_word or not is_capitalized(right.raw):
            continue
        if f"{left.raw.lower()}." in abbreviations:
            continue
        if right.raw in PRONOUN_I_FORMS or right.raw in proper_nouns:
            continue
        if "\n" in text[left.end : right.start]:
            continue
        if _title_run_length(tokens, idx + 1) >= 2 or _title_run_ending_at(tokens, idx) >= 2:
            continue
        hits.append(idx)
    return hits


def _title_run_length(tokens: Sequence[Token], start: int) -> int:
    length = 0
    for token in tokens[start:]:
        if not token.is_word or not is_capitalized(token.raw):
            break
        length += 1
    return length


def _title_run_ending_at(tokens: Sequence[Token], end: int) -> int:
    length = 0
    for idx in range(end, -1, -1):
        token = tokens[idx]
        if not token.is_word or not is_capitalized(token.raw):
            break
        length += 1
    return length


def _unterminated_paragraph_ends(text: str, tokens: Sequence[Token]) -> List[int]:
    starts = [token.start for token in tokens]
    paragraphs: List[Tuple[int, int]] = []
    for para_start, para_end in paragraph_spans(text):
        first = bisect_left(starts, para_start)
        stop = bisect_left(starts, para_end) if para_end > para_start else first
        words = [idx for idx in range(first, stop) if tokens[idx].is_word]
        if words:
            paragraphs.append((words[-1], stop))
    # The essay's own ending is never flagged, terminated or not.
    last_words: List[int] = []
    for last_word, stop in paragraphs[:-1]:
        if any(tokens[idx].raw in TERMINALS for idx in range(last_word + 1, stop)):
            continue
        last_words.append(last_word)
    return last_words

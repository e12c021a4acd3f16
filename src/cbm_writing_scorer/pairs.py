"""Correct Writing Sequence pairs over the token stream."""

from __future__ import annotations

from typing import Callable, List, Sequence

from .models import CwsPair, Token
from .textutils import ESSENTIAL_PUNCT, is_capitalized

SpellCheck = Callable[[str], bool]

MISSPELLING = "misspelling"
CAPITALIZATION = "capitalization"
NONESSENTIAL_PUNCT = "nonessential-punct"
NOT_UNITS = "not-units"


def is_writing_unit(token: Token) -> bool:
    """Words and essential punctuation take part in CWS; everything else is ignored."""
    return token.is_word or token.raw in ESSENTIAL_PUNCT


def is_essential_punct(token: Token) -> bool:
    return not token.is_word and token.raw in ESSENTIAL_PUNCT


def build_pairs(tokens: Sequence[Token], is_word_correct: SpellCheck) -> List[CwsPair]:
    """
    Build one pair for the boundary before the first writing unit and one for
    every boundary after it.

    A pair is eligible only when both of its neighbours are writing units and
    one of them is a word; other punctuation on either side makes the boundary
    ineligible rather than incorrect. Validity follows the rubric:

    - word/word: both words spelled correctly
    - word/terminal: the word is spelled correctly
    - terminal/word: the word is spelled correctly and capitalized
    - initial: the first unit is a correctly spelled, capitalized word
    """
    first = next((token.index for token in tokens if is_writing_unit(token)), None)
    if first is None:
        return []

    pairs: List[CwsPair] = [_initial_pair(tokens[first], is_word_correct)]
    for idx in range(first + 1, len(tokens)):
        pairs.append(_interior_pair(tokens[idx - 1], tokens[idx], is_word_correct))
    return pairs


def _initial_pair(token: Token, is_word_correct: SpellCheck) -> CwsPair:
    if not token.is_word:
        return CwsPair(token.index, None, token.index, eligible=False, valid=False, reason=NOT_UNITS)
    spelled = is_word_correct(token.raw)
    capital = is_capitalized(token.raw)
    valid = spelled and capital
    reason = None
    if not valid:
        reason = MISSPELLING if capital else CAPITALIZATION
    return CwsPair(token.index, None, token.index, eligible=True, valid=valid, reason=reason)


def _interior_pair(left: Token, right: Token, is_word_correct: SpellCheck) -> CwsPair:
    boundary = right.index
    if left.is_word and right.is_word:
        valid = is_word_correct(left.raw) and is_word_correct(right.raw)
        return _pair(boundary, left, right, valid, None if valid else MISSPELLING)
    if left.is_word and is_essential_punct(right):
        # The mark itself is correct by definition.
        valid = is_word_correct(left.raw)
        return _pair(boundary, left, right, valid, None if valid else MISSPELLING)
    if is_essential_punct(left) and right.is_word:
        spelled = is_word_correct(right.raw)
        capital = is_capitalized(right.raw)
        valid = spelled and capital
        reason = None
        if not valid:
            reason = MISSPELLING if capital else CAPITALIZATION
        return _pair(boundary, left, right, valid, reason)
    reason = NOT_UNITS if is_writing_unit(left) and is_writing_unit(right) else NONESSENTIAL_PUNCT
    return CwsPair(boundary, left.index, right.index, eligible=False, valid=False, reason=reason)


def _pair(boundary: int, left: Token, right: Token, valid: bool, reason: str | None) -> CwsPair:
    return CwsPair(boundary, left.index, right.index, eligible=True, valid=valid, reason=reason)


def count_cws(pairs: Sequence[CwsPair]) -> int:
    return sum(1 for pair in pairs if pair.eligible and pair.valid)


def count_eligible(pairs: Sequence[CwsPair]) -> int:
    return sum(1 for pair in pairs if pair.eligible)

"""Projection of grammar-checker issues onto tokens and boundaries."""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from typing import Iterable, List, Sequence, Tuple

from .grammar.issues import TERMINAL_RULES
from .models import (
    AuditRow,
    EditType,
    GrammarIssue,
    InsertionReason,
    IssueCategory,
    IssueMapping,
    Token,
    TriState,
    VirtualTerminalInsertion,
)
from .textutils import CLOSERS, OPENERS, TERMINALS, differs_only_by_case

logger = logging.getLogger(__name__)

SENTENCE_START_RULE = "UPPERCASE_SENTENCE_START"

_SEVERITY_RANK = {TriState.OK: 0, TriState.MAYBE: 1, TriState.BAD: 2}


def offset_to_boundary(tokens: Sequence[Token], offset: int) -> int:
    """Index of the first token starting at or after ``offset``; N past the end."""
    starts = [token.start for token in tokens]
    return bisect_left(starts, offset)


def map_issues(
    text: str,
    tokens: Sequence[Token],
    issues: Iterable[GrammarIssue],
    *,
    keep_end_of_text: bool = False,
    show_capitalization_overlay: bool = True,
) -> IssueMapping:
    """
    Classify each issue into per-token severities and terminal insertions.

    Issues are processed in order; when two issues propose a terminal at the
    same boundary the first one wins. Issues that cannot be anchored to any
    token or boundary are counted in ``dropped`` and otherwise ignored.
    """
    mapping = IssueMapping()
    starts = [token.start for token in tokens]
    ends = [token.end for token in tokens]
    taken: set[int] = set()
    text_length = len(text)

    for issue in issues:
        offset = min(max(0, issue.offset), text_length)
        end = min(max(offset, issue.end), text_length)
        original = text[offset:end]
        replacement = issue.replacements[0] if issue.replacements else ""

        proposals = _terminal_proposals(issue, offset, end, original, replacement)
        if proposals:
            placed = 0
            for char, at in proposals:
                boundary = offset_to_boundary(tokens, at)
                if _propose(mapping, taken, tokens, boundary, char, at, issue, keep_end_of_text):
                    placed += 1
            if placed:
                mapping.audit_rows.append(_audit_row(issue, offset, end, replacement))
            else:
                mapping.dropped += 1
            continue

        anchor = _anchor_token(tokens, starts, ends, offset, end, issue.edit_type)
        if anchor is None:
            mapping.dropped += 1
            logger.debug("Dropping issue %s at %d: no token to anchor", issue.rule_id, offset)
            continue

        mapping.audit_rows.append(_audit_row(issue, offset, end, replacement))
        if issue.category is IssueCategory.SPELLING:
            last = bisect_left(starts, end) if end > offset else anchor + 1
            for token in tokens[anchor:max(last, anchor + 1)]:
                if token.is_word:
                    _raise_severity(mapping, token.index, TriState.BAD)
            continue
        if issue.category is IssueCategory.PUNCTUATION:
            continue

        token = tokens[anchor]
        if not token.is_word:
            continue
        if differs_only_by_case(original, replacement):
            _raise_severity(mapping, token.index, TriState.BAD)
            if show_capitalization_overlay:
                mapping.overlays[token.index] = replacement
            if issue.rule_id.upper() == SENTENCE_START_RULE:
                _propose_sentence_break(mapping, taken, tokens, token, issue, keep_end_of_text)
        elif _is_word_substitution(original, replacement):
            _raise_severity(mapping, token.index, TriState.BAD)
        else:
            _raise_severity(mapping, token.index, TriState.MAYBE)

    mapping.insertions.sort(key=lambda ins: ins.before_b_index)
    return mapping


def _terminal_proposals(
    issue: GrammarIssue, offset: int, end: int, original: str, replacement: str
) -> List[Tuple[str, int]]:
    if replacement in TERMINALS:
        return [(replacement, offset if issue.edit_type is EditType.INSERT else end)]
    proposals: List[Tuple[str, int]] = []
    if replacement and issue.edit_type is not EditType.DELETE:
        for idx, char in enumerate(replacement):
            if char in TERMINALS and char not in original:
                proposals.append((char, min(offset + idx, end)))
    if not proposals and issue.rule_id.upper() in TERMINAL_RULES:
        proposals.append((".", end))
    return proposals


def _propose(
    mapping: IssueMapping,
    taken: set[int],
    tokens: Sequence[Token],
    boundary: int,
    char: str,
    at: int,
    issue: GrammarIssue,
    keep_end_of_text: bool,
) -> bool:
    count = len(tokens)
    if boundary < 0 or boundary > count:
        return False
    if boundary == count and not keep_end_of_text:
        logger.debug("Dropping end-of-text insertion from %s", issue.rule_id)
        return False
    if boundary in taken:
        return False
    taken.add(boundary)
    mapping.insertions.append(
        VirtualTerminalInsertion(
            before_b_index=boundary,
            char=char,
            reason=InsertionReason.GRAMMAR_CHECKER,
            message=issue.message or f"Add {char}",
            at=at,
        )
    )
    return True


def _propose_sentence_break(
    mapping: IssueMapping,
    taken: set[int],
    tokens: Sequence[Token],
    token: Token,
    issue: GrammarIssue,
    keep_end_of_text: bool,
) -> None:
    if token.index == 0:
        return
    previous = tokens[token.index - 1]
    if not previous.is_word:
        return
    if previous.raw in TERMINALS or previous.raw in OPENERS or previous.raw in CLOSERS:
        return
    _propose(mapping, taken, tokens, token.index, ".", previous.end, issue, keep_end_of_text)


def _anchor_token(
    tokens: Sequence[Token],
    starts: List[int],
    ends: List[int],
    offset: int,
    end: int,
    edit_type: EditType,
) -> int | None:
    if not tokens:
        return None
    if end > offset:
        # First token whose end lies past the span start and whose start is before the span end.
        candidate = bisect_right(ends, offset)
        if candidate < len(tokens) and tokens[candidate].start < end:
            return candidate
    if edit_type is EditType.INSERT:
        before = bisect_right(ends, offset) - 1
        return before if before >= 0 else None
    after = bisect_left(starts, offset)
    return after if after < len(tokens) else None


def _is_word_substitution(original: str, replacement: str) -> bool:
    if not original or not replacement:
        return False
    if any(ch.isspace() for ch in original) or any(ch.isspace() for ch in replacement):
        return False
    return original.lower() != replacement.lower()


def _raise_severity(mapping: IssueMapping, index: int, severity: TriState) -> None:
    current = mapping.token_severity.get(index, TriState.OK)
    if _SEVERITY_RANK[severity] > _SEVERITY_RANK[current]:
        mapping.token_severity[index] = severity


def _audit_row(issue: GrammarIssue, offset: int, end: int, replacement: str) -> AuditRow:
    return AuditRow(
        tag=issue.rule_id or issue.category.value,
        message=issue.message,
        span=(offset, end),
        replacement=replacement,
    )

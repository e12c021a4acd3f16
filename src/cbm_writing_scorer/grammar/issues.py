"""
Normalization of grammar-service payloads into ``GrammarIssue``.

LanguageTool servers, LanguageTool-compatible proxies and GrammarBot all
describe the same thing with different field names. Everything an external
checker returns goes through ``normalize_issues`` before the engine sees it.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Sequence

from ..models import EditType, GrammarIssue, IssueCategory
from ..textutils import has_astral_chars, utf16_to_index

logger = logging.getLogger(__name__)

SPELLING_CATEGORIES = frozenset({"TYPOS", "SPELL", "SPELLING", "MISSPELLING"})
PUNCTUATION_CATEGORIES = frozenset({"PUNCTUATION", "PUNC", "TYPOGRAPHY"})
SPELLING_RULE_PREFIXES = ("MORFOLOGIK_RULE", "HUNSPELL")
TERMINAL_RULES = frozenset({"MISSING_SENTENCE_TERMINATOR", "PUNCTUATION_PARAGRAPH_END"})

_EDIT_TYPES = {
    "INSERT": EditType.INSERT,
    "ADD": EditType.INSERT,
    "MODIFY": EditType.MODIFY,
    "REPLACE": EditType.MODIFY,
    "DELETE": EditType.DELETE,
}


def normalize_response(payload: Any, text: str, *, utf16_offsets: bool = True) -> List[GrammarIssue]:
    """Unwrap a checker response body and normalize the issues it carries."""
    if payload is None:
        return []
    if isinstance(payload, Mapping):
        for key in ("matches", "edits", "issues"):
            value = payload.get(key)
            if isinstance(value, list):
                return normalize_issues(value, text, utf16_offsets=utf16_offsets)
        logger.debug("Checker payload has no recognizable issue list: %s", sorted(payload))
        return []
    if isinstance(payload, (list, tuple)):
        return normalize_issues(payload, text, utf16_offsets=utf16_offsets)
    logger.debug("Ignoring checker payload of type %s", type(payload).__name__)
    return []


def normalize_issues(
    raw_issues: Iterable[Any] | None, text: str, *, utf16_offsets: bool = True
) -> List[GrammarIssue]:
    """Normalize every usable issue, silently dropping the rest."""
    convert = utf16_offsets and has_astral_chars(text)
    issues: List[GrammarIssue] = []
    for raw in raw_issues or []:
        issue = normalize_issue(raw, text, convert_utf16=convert)
        if issue is not None:
            issues.append(issue)
    return issues


def normalize_issue(raw: Any, text: str, *, convert_utf16: bool = False) -> GrammarIssue | None:
    """Return a clamped GrammarIssue for a single upstream entry, or None."""
    text_length = len(text)
    if isinstance(raw, GrammarIssue):
        start, end = _clamp(raw.offset, raw.end, text_length)
        return GrammarIssue(
            offset=start,
            length=end - start,
            category=raw.category,
            rule_id=raw.rule_id,
            message=raw.message,
            replacements=raw.replacements,
            edit_type=raw.edit_type,
        )
    if not isinstance(raw, Mapping):
        logger.debug("Dropping non-mapping issue %r", raw)
        return None

    span = _span(raw)
    if span is None:
        logger.debug("Dropping issue without a usable offset: %r", raw)
        return None
    start, end = span
    if convert_utf16:
        start, end = utf16_to_index(text, start), utf16_to_index(text, end)
    clamped = _clamp(start, end, text_length)
    if clamped != (start, end):
        logger.debug("Clamped issue span %s to %s", (start, end), clamped)
    start, end = clamped

    rule_id = _rule_id(raw)
    replacements = _replacements(raw)
    return GrammarIssue(
        offset=start,
        length=end - start,
        category=_category(raw, rule_id),
        rule_id=rule_id,
        message=_message(raw),
        replacements=replacements,
        edit_type=_edit_type(raw, end - start),
    )


def _clamp(start: int, end: int, text_length: int) -> tuple[int, int]:
    start = min(max(0, start), text_length)
    end = min(max(start, end), text_length)
    return start, end


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _span(raw: Mapping[str, Any]) -> tuple[int, int] | None:
    # GrammarBot edits carry explicit start/end positions.
    start = _as_int(raw.get("start"))
    end = _as_int(raw.get("end"))
    if start is not None and end is not None:
        return start, end

    context = raw.get("context")
    context = context if isinstance(context, Mapping) else {}
    offset = _first_int(raw.get("offset"), raw.get("fromPos"), context.get("offset"))
    if offset is None:
        return None
    length = _first_int(raw.get("length"), raw.get("len"), context.get("length"))
    if length is None:
        to_pos = _as_int(raw.get("toPos"))
        length = to_pos - offset if to_pos is not None else 0
    return offset, offset + max(0, length)


def _first_int(*values: Any) -> int | None:
    for value in values:
        number = _as_int(value)
        if number is not None:
            return number
    return None


def _rule_id(raw: Mapping[str, Any]) -> str:
    rule = raw.get("rule")
    if isinstance(rule, Mapping) and rule.get("id"):
        return str(rule["id"])
    for key in ("ruleId", "rule_id", "id", "err_type"):
        value = raw.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _category(raw: Mapping[str, Any], rule_id: str) -> IssueCategory:
    names: list[str] = []
    rule = raw.get("rule")
    if isinstance(rule, Mapping):
        category = rule.get("category")
        if isinstance(category, Mapping):
            names.extend(str(category.get(key) or "") for key in ("id", "name"))
        names.append(str(rule.get("issueType") or ""))
    for key in ("category", "categoryId", "err_cat"):
        value = raw.get(key)
        if isinstance(value, Mapping):
            names.extend(str(value.get(k) or "") for k in ("id", "name"))
        elif value:
            names.append(str(value))

    upper_rule = rule_id.upper()
    if upper_rule.startswith(SPELLING_RULE_PREFIXES):
        return IssueCategory.SPELLING
    if upper_rule in TERMINAL_RULES:
        return IssueCategory.PUNCTUATION
    normalized = {name.strip().upper() for name in names if name.strip()}
    if normalized & SPELLING_CATEGORIES:
        return IssueCategory.SPELLING
    if normalized & PUNCTUATION_CATEGORIES:
        return IssueCategory.PUNCTUATION
    return IssueCategory.GRAMMAR


def _message(raw: Mapping[str, Any]) -> str:
    for key in ("message", "msg", "err_desc", "shortMessage"):
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _replacements(raw: Mapping[str, Any]) -> tuple[str, ...]:
    if "replace" in raw and isinstance(raw.get("replace"), str):
        return (raw["replace"],)
    values = raw.get("replacements")
    if not isinstance(values, Sequence) or isinstance(values, str):
        return ()
    out: list[str] = []
    for item in values:
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Mapping):
            for key in ("value", "val", "text"):
                candidate = item.get(key)
                if isinstance(candidate, str):
                    out.append(candidate)
                    break
    return tuple(out)


def _edit_type(raw: Mapping[str, Any], length: int) -> EditType:
    explicit = raw.get("edit_type") or raw.get("editType")
    if isinstance(explicit, str) and explicit.upper() in _EDIT_TYPES:
        return _EDIT_TYPES[explicit.upper()]
    return EditType.INSERT if length == 0 else EditType.MODIFY

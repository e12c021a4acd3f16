from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List


def lt_match(
    offset: int,
    length: int,
    replacements: Iterable[str] = (),
    *,
    rule_id: str = "GENERIC_RULE",
    category: str = "GRAMMAR",
    message: str = "",
) -> Dict[str, Any]:
    """Build a LanguageTool-style match dictionary."""
    return {
        "offset": offset,
        "length": length,
        "message": message or f"{rule_id} at {offset}",
        "replacements": [{"value": value} for value in replacements],
        "rule": {"id": rule_id, "category": {"id": category, "name": category.title()}},
    }


def spell_checker(*bad_words: str) -> Callable[[str], bool]:
    """Spell checker that rejects exactly the given words."""
    rejected = {word.lower() for word in bad_words}
    return lambda word: word.lower() not in rejected


def raws(tokens: List[Any]) -> List[str]:
    return [token.raw for token in tokens]

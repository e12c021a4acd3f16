from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .checkers import (
    CallableGrammarChecker,
    GrammarCheckError,
    GrammarChecker,
    LanguageToolChecker,
    NullGrammarChecker,
)
from .issues import normalize_issue, normalize_issues, normalize_response
from .languagetool_client import LanguageToolClient

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import ScorerConfig

__all__ = [
    "GrammarChecker",
    "GrammarCheckError",
    "NullGrammarChecker",
    "CallableGrammarChecker",
    "LanguageToolChecker",
    "LanguageToolClient",
    "normalize_issue",
    "normalize_issues",
    "normalize_response",
    "create_checker",
    "build_checker_from_config",
]


def create_checker(name: str, **kwargs: Any) -> GrammarChecker:
    """Factory for building grammar checkers by name."""
    normalized = name.lower().strip()
    if normalized in {"none", "null", "heuristics"}:
        return NullGrammarChecker()
    if normalized in {"languagetool", "lt"}:
        return LanguageToolChecker(LanguageToolClient(**kwargs))
    raise ValueError(f"Unknown grammar checker '{name}'.")


def build_checker_from_config(config: "ScorerConfig") -> GrammarChecker:
    """Convenience helper to build the configured checker."""
    if config.languagetool.enabled:
        return create_checker("languagetool", settings=config.languagetool)
    return create_checker("none")

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, List

from ..models import GrammarIssue
from .issues import normalize_response

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .languagetool_client import LanguageToolClient

logger = logging.getLogger(__name__)


class GrammarCheckError(RuntimeError):
    """Raised when a grammar checker cannot produce a result."""


class GrammarChecker(ABC):
    """Abstract interface for external grammar-checking services."""

    @abstractmethod
    def check(
        self, text: str, language: str = "en-US", level: str | None = None
    ) -> List[GrammarIssue]:
        """Return normalized issues for the exact text that was sent."""
        raise NotImplementedError


class NullGrammarChecker(GrammarChecker):
    """Reports nothing, leaving the heuristics as the only signal."""

    def check(
        self, text: str, language: str = "en-US", level: str | None = None
    ) -> List[GrammarIssue]:
        return []


class CallableGrammarChecker(GrammarChecker):
    """Adapt an arbitrary callable returning raw issue payloads."""

    def __init__(self, func: Callable[[str, str], Any]) -> None:
        self._func = func

    def check(
        self, text: str, language: str = "en-US", level: str | None = None
    ) -> List[GrammarIssue]:
        try:
            payload = self._func(text, language)
        except GrammarCheckError:
            raise
        except Exception as exc:
            raise GrammarCheckError(f"Grammar callable failed: {exc}") from exc
        return normalize_response(payload, text)


class LanguageToolChecker(GrammarChecker):
    """Checker backed by a LanguageTool HTTP server."""

    def __init__(self, client: "LanguageToolClient") -> None:
        self._client = client

    def check(
        self, text: str, language: str = "en-US", level: str | None = None
    ) -> List[GrammarIssue]:
        if not text.strip():
            return []
        matches = self._client.check(text, language=language, level=level)
        issues = normalize_response(matches, text)
        logger.debug(
            "LanguageTool returned %d matches (%d usable) for %d chars",
            len(matches),
            len(issues),
            len(text),
        )
        return issues

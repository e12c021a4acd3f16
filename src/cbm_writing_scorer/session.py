"""
Review session tying the scoring engine together.

Text edits re-tokenize and recompute everything; grammar-check responses
are tagged with the run id of the text they were requested for and are
ignored once a newer edit has happened.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List

from .boundaries import BoundaryStateStore, UndoAction
from .config import ScorerConfig
from .grammar import GrammarChecker, normalize_response
from .heuristics import detect_missing_terminals, merge_insertions
from .lexicon import LexiconSpellChecker
from .mapping import map_issues
from .models import (
    KPI,
    AuditRow,
    BoundaryStatus,
    DisplayToken,
    IssueMapping,
    RubricScore,
    Token,
    TokenModel,
    TriState,
    VirtualTerminalInsertion,
)
from .scoring import compute_kpis, score_text
from .textutils import is_numeral
from .tokenization import tokenize

logger = logging.getLogger(__name__)


class ScoringSession:
    """Holds one writing sample under review."""

    def __init__(
        self,
        config: ScorerConfig | None = None,
        spell_checker: Callable[[str], bool] | None = None,
    ) -> None:
        self.config = config or ScorerConfig()
        if spell_checker is None and self.config.lexicon_path:
            spell_checker = LexiconSpellChecker.from_path(self.config.lexicon_path)
        self._spell_checker = spell_checker
        self._text = ""
        self._tokens: List[Token] = []
        self._run_id = 0
        self._mapping = IssueMapping()
        self._heuristic: List[VirtualTerminalInsertion] = []
        self._insertions: List[VirtualTerminalInsertion] = []
        self.store = BoundaryStateStore()

    @property
    def text(self) -> str:
        return self._text

    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens)

    @property
    def run_id(self) -> int:
        return self._run_id

    @property
    def insertions(self) -> List[VirtualTerminalInsertion]:
        return list(self._insertions)

    @property
    def dropped_issues(self) -> int:
        return self._mapping.dropped

    def update_text(self, text: str) -> int:
        """Start a new snapshot; grammar results for older runs are now stale."""
        self._run_id += 1
        self._text = text
        self._tokens = tokenize(text)
        self._mapping = IssueMapping()
        self._recompute()
        return self._run_id

    def apply_grammar_result(self, run_id: int, raw_issues: Any) -> bool:
        if run_id != self._run_id:
            logger.debug("Ignoring stale grammar result for run %d (latest %d)", run_id, self._run_id)
            return False
        issues = normalize_response(raw_issues, self._text)
        self._mapping = map_issues(
            self._text,
            self._tokens,
            issues,
            keep_end_of_text=self.config.keep_end_of_text_insertions,
            show_capitalization_overlay=self.config.show_capitalization_overlay,
        )
        if self._mapping.dropped:
            logger.debug("Dropped %d unmappable grammar issues", self._mapping.dropped)
        self._recompute()
        return True

    def apply_grammar_failure(self, run_id: int, error: BaseException | str) -> bool:
        """Fall back to heuristic-only proposals for the current run."""
        if run_id != self._run_id:
            return False
        logger.warning("Grammar check failed; using heuristics only: %s", error)
        self._mapping = IssueMapping()
        self._recompute()
        return True

    def run_check(self, checker: GrammarChecker) -> bool:
        run_id = self._run_id
        try:
            issues = checker.check(
                self._text,
                language=self.config.language,
                level=self.config.languagetool.level,
            )
        except Exception as exc:  # noqa: broad-except
            self.apply_grammar_failure(run_id, exc)
            return False
        return self.apply_grammar_result(run_id, issues)

    def _recompute(self) -> None:
        severity = dict(self._mapping.token_severity)
        if self._spell_checker is not None:
            for token in self._tokens:
                if token.is_word and not is_numeral(token.raw) and not self._spell_checker(token.raw):
                    severity[token.index] = TriState.BAD
        self._heuristic = detect_missing_terminals(
            self._text,
            self._tokens,
            proposed={insertion.before_b_index for insertion in self._mapping.insertions},
            abbreviations=self.config.abbreviation_set(),
            proper_nouns=self.config.proper_noun_set(),
            capital_pass=self.config.heuristics_enabled,
            paragraph_pass=self.config.paragraph_fallback_enabled,
        )
        self._insertions = merge_insertions(self._mapping.insertions, self._heuristic)
        self.store.recompute(self._tokens, severity, self._insertions)

    def click_token(self, index: int) -> TriState:
        return self.store.click_token(index)

    def click_boundary(self, index: int) -> TriState:
        return self.store.click_boundary(index)

    def remove_token(self, index: int) -> UndoAction | None:
        return self.store.remove_token(index)

    def remove_boundary(self, index: int) -> UndoAction | None:
        return self.store.remove_boundary(index)

    def undo(self) -> UndoAction | None:
        return self.store.undo()

    def token_models(self) -> List[TokenModel]:
        return self.store.token_models()

    def boundary_states(self) -> List[BoundaryStatus]:
        return self.store.boundary_states()

    def display_tokens(self) -> List[DisplayToken]:
        return [
            DisplayToken(
                token=model.token,
                severity=model.state,
                overlay=self._mapping.overlays.get(model.index),
                removed=model.removed,
            )
            for model in self.store.token_models()
        ]

    def audit_rows(self) -> List[AuditRow]:
        """Mapped checker issues followed by heuristic proposals."""
        rows = list(self._mapping.audit_rows)
        for insertion in self._heuristic:
            at = insertion.at if insertion.at is not None else 0
            rows.append(
                AuditRow(
                    tag=insertion.reason.value,
                    message=insertion.message,
                    span=(at, at),
                    replacement=insertion.char,
                )
            )
        return rows

    def kpis(self, elapsed_minutes: float | None = None) -> KPI:
        return compute_kpis(
            self.store.token_models(),
            self.store.boundary_states(),
            elapsed_minutes,
            min_minutes=self.config.min_minutes,
        )

    def rubric(self) -> RubricScore:
        return score_text(self._text, self._spell_checker, config=self.config)

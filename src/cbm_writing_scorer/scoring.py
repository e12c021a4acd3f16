from __future__ import annotations

from typing import Callable, Sequence

from .config import ScorerConfig
from .heuristics import detect_missing_terminals
from .lexicon import LexiconSpellChecker
from .models import KPI, BoundaryStatus, RubricScore, TokenModel, TriState
from .pairs import build_pairs, count_cws, count_eligible
from .textutils import is_numeral
from .tokenization import tokenize, word_tokens

DEFAULT_MIN_MINUTES = 0.5


def compute_kpis(
    token_models: Sequence[TokenModel],
    boundary_states: Sequence[BoundaryStatus],
    elapsed_minutes: float | None = None,
    *,
    min_minutes: float = DEFAULT_MIN_MINUTES,
) -> KPI:
    """
    Compute TWW, WSC and CWS from reviewed tokens and boundaries.

    Removed tokens are excluded everywhere; a removed boundary counts as
    ``ok``. Only boundaries with a non-removed word on both sides are
    eligible, and a ``maybe`` boundary still earns credit.
    """
    counted = [
        model
        for model in token_models
        if model.is_word and not model.removed and not is_numeral(model.raw)
    ]
    tww = len(counted)
    wsc = tww - sum(1 for model in counted if model.state is TriState.BAD)

    eligible = 0
    cws = 0
    for idx in range(1, len(token_models)):
        left = token_models[idx - 1]
        right = token_models[idx]
        if not (left.is_word and right.is_word) or left.removed or right.removed:
            continue
        eligible += 1
        if left.state is not TriState.OK or right.state is not TriState.OK:
            continue
        if _effective_status(boundary_states, idx) is not TriState.BAD:
            cws += 1

    return KPI(
        tww=tww,
        wsc=wsc,
        cws=cws,
        eligible_boundaries=eligible,
        pct_cws=percent(cws, eligible),
        cws_per_minute=cws_per_minute(cws, elapsed_minutes, min_minutes=min_minutes),
    )


def percent(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return int(part * 100 / whole + 0.5)


def cws_per_minute(
    cws: int, elapsed_minutes: float | None, *, min_minutes: float = DEFAULT_MIN_MINUTES
) -> float:
    """
    CWS rate rounded to one decimal.

    Unknown or non-positive durations yield 0; shorter durations are raised
    to ``min_minutes``.
    """
    if elapsed_minutes is None or elapsed_minutes <= 0:
        return 0.0
    return round(cws / max(elapsed_minutes, min_minutes), 1)


def _effective_status(boundary_states: Sequence[BoundaryStatus], index: int) -> TriState:
    if index >= len(boundary_states):
        return TriState.OK
    state = boundary_states[index]
    if state.removed:
        return TriState.OK
    return state.status


def score_text(
    text: str,
    is_word_correct: Callable[[str], bool] | None = None,
    *,
    config: ScorerConfig | None = None,
) -> RubricScore:
    """
    Score raw text with the writing-sequence rubric, without reviewer input.

    Numerals are not counted as words. Missing-terminal proposals from the
    heuristics are returned alongside the counts for display.
    """
    config = config or ScorerConfig()
    if is_word_correct is None:
        is_word_correct = LexiconSpellChecker.from_path(config.lexicon_path)

    tokens = tokenize(text)
    words = [token for token in word_tokens(tokens) if not is_numeral(token.raw)]
    pairs = build_pairs(tokens, is_word_correct)
    insertions = detect_missing_terminals(
        text,
        tokens,
        abbreviations=config.abbreviation_set(),
        proper_nouns=config.proper_noun_set(),
        capital_pass=config.heuristics_enabled,
        paragraph_pass=config.paragraph_fallback_enabled,
    )
    return RubricScore(
        tww=len(words),
        wsc=sum(1 for token in words if is_word_correct(token.raw)),
        cws=count_cws(pairs),
        eligible_boundaries=count_eligible(pairs),
        insertions=list(insertions),
    )


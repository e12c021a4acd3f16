"""
cbm_writing_scorer package exports convenience helpers for library consumers.
"""

from __future__ import annotations

import logging

from .boundaries import BoundaryStateStore, next_state
from .config import ScorerConfig, config_from_dict, config_from_yaml, load_config
from .grammar import build_checker_from_config, create_checker
from .heuristics import detect_missing_terminals, merge_insertions
from .mapping import map_issues
from .pairs import build_pairs
from .scoring import compute_kpis, score_text
from .session import ScoringSession
from .tokenization import tokenize

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ScorerConfig",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "create_checker",
    "build_checker_from_config",
    "tokenize",
    "map_issues",
    "detect_missing_terminals",
    "merge_insertions",
    "build_pairs",
    "BoundaryStateStore",
    "next_state",
    "compute_kpis",
    "score_text",
    "ScoringSession",
]

__version__ = "0.1.0"

"""Spelling lexicon used when no external spell checker is wired in."""

from .build import build_lexicon, write_lexicon
from .loader import LexiconSpellChecker, load_lexicon

__all__ = ["LexiconSpellChecker", "build_lexicon", "load_lexicon", "write_lexicon"]

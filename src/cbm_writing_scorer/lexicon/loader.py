from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Set

from ..dictionaries import DEFAULT_DICTIONARY
from ..textutils import is_numeral, normalize_word

LOGGER = logging.getLogger(__name__)


def load_lexicon(path: Path | str) -> Set[str]:
    """
    Load a word list from disk.

    Parameters
    ----------
    path:
        Either a plain file with one word per line or a TSV with a ``token``
        column (the format written by ``cbm-lexicon build``). Lines starting
        with ``#`` are ignored.
    """
    path = Path(path)
    words: Set[str] = set()
    if not path.exists():
        LOGGER.warning("Lexicon file %s does not exist; using built-in words only.", path)
        return words

    with path.open("r", encoding="utf-8", newline="") as handle:
        first_line = handle.readline()
        handle.seek(0)
        if "\t" in first_line and "token" in first_line.split("\t"):
            reader = csv.DictReader(handle, delimiter="\t")
            for row in reader:
                token = (row.get("token") or "").strip()
                if token:
                    words.add(normalize_word(token))
        else:
            for line in handle:
                token = line.strip()
                if token and not token.startswith("#"):
                    words.add(normalize_word(token))
    LOGGER.debug("Loaded %d words from %s", len(words), path)
    return words


class LexiconSpellChecker:
    """
    Word-level spell check against the built-in dictionary plus optional
    extra words. Pure numerals are always accepted.
    """

    def __init__(self, words: Iterable[str] | None = None, *, include_defaults: bool = True) -> None:
        self._words: Set[str] = set(DEFAULT_DICTIONARY) if include_defaults else set()
        if words is not None:
            self._words.update(normalize_word(word) for word in words)

    @classmethod
    def from_path(cls, path: Path | str | None) -> "LexiconSpellChecker":
        if path is None:
            return cls()
        return cls(load_lexicon(path))

    def __contains__(self, word: str) -> bool:
        return self.is_correct(word)

    def __len__(self) -> int:
        return len(self._words)

    def __call__(self, word: str) -> bool:
        return self.is_correct(word)

    def is_correct(self, word: str) -> bool:
        if is_numeral(word):
            return True
        normalized = normalize_word(word)
        if normalized in self._words:
            return True
        # Possessives of known words ("dog's") are spelled correctly.
        if normalized.endswith("'s") and normalized[:-2] in self._words:
            return True
        return False

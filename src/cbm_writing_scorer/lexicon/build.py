from __future__ import annotations

import csv
import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Tuple

from ..textutils import is_numeral, normalize_word
from ..tokenization import tokenize, word_tokens

LOGGER = logging.getLogger(__name__)


def build_lexicon(paths: Iterable[Path | str], min_count: int = 1) -> List[Tuple[str, int]]:
    """Count lowercase word tokens across reference texts, most frequent first."""
    counts: Counter[str] = Counter()
    for raw_path in paths:
        path = Path(raw_path)
        files = sorted(path.rglob("*.txt")) if path.is_dir() else [path]
        for file_path in files:
            text = file_path.read_text(encoding="utf-8")
            counts.update(
                normalize_word(token.raw)
                for token in word_tokens(tokenize(text))
                if not is_numeral(token.raw)
            )
    if not counts:
        LOGGER.warning("No words found in the supplied reference texts.")
    ranked = [(word, count) for word, count in counts.items() if count >= min_count]
    ranked.sort(key=lambda item: (-item[1], item[0]))
    return ranked


def write_lexicon(entries: Iterable[Tuple[str, int]], path: Path | str) -> int:
    """Write ``token``/``count`` rows as TSV and return the number written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=["token", "count"], delimiter="\t")
        writer.writeheader()
        for token, count in entries:
            writer.writerow({"token": token, "count": count})
            written += 1
    LOGGER.info("Wrote %d lexicon entries to %s", written, path)
    return written

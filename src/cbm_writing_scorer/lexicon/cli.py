from __future__ import annotations

from pathlib import Path
from typing import Tuple

import click

from ..tokenization import tokenize, word_tokens
from . import build
from .loader import LexiconSpellChecker


@click.group(name="lexicon")
def lexicon_group() -> None:
    """Commands for managing the spelling lexicon."""


@lexicon_group.command("build")
@click.argument(
    "sources",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("data/lexicon/words.tsv"),
    show_default=True,
    help="Destination TSV file.",
)
@click.option(
    "--min-count",
    type=int,
    default=1,
    show_default=True,
    help="Drop words seen fewer times than this.",
)
def lexicon_build(sources: Tuple[Path, ...], output_path: Path, min_count: int) -> None:
    """Build a lexicon TSV from reference .txt files or directories."""
    entries = build.build_lexicon(sources, min_count=min_count)
    written = build.write_lexicon(entries, output_path)
    click.echo(f"Wrote {written} words to {output_path}")


@lexicon_group.command("check")
@click.argument("text")
@click.option(
    "--lexicon",
    "lexicon_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Optional lexicon file merged with the built-in words.",
)
def lexicon_check(text: str, lexicon_path: Path | None) -> None:
    """Report words in TEXT that the lexicon does not know."""
    checker = LexiconSpellChecker.from_path(lexicon_path)
    unknown = [token.raw for token in word_tokens(tokenize(text)) if not checker(token.raw)]
    if not unknown:
        click.echo("All words recognized.")
        return
    for word in unknown:
        click.echo(word)

from __future__ import annotations

from typing import List

from .models import Token, TokenKind

# Joiners stay inside a word only when a letter follows immediately.
WORD_JOINERS = frozenset({"'", "’", "-"})
BOUNDARY_MARK = "^"


def tokenize(text: str) -> List[Token]:
    """
    Split text into WORD, PUNCT and BOUNDARY tokens with character offsets.

    Whitespace is skipped; every other character belongs to exactly one
    token. Identical input always yields an identical token list.
    """
    tokens: List[Token] = []
    length = len(text)
    pos = 0
    while pos < length:
        ch = text[pos]
        if ch.isspace():
            pos += 1
            continue
        start = pos
        if ch.isalnum():
            pos += 1
            while pos < length:
                nxt = text[pos]
                if nxt.isalnum():
                    pos += 1
                elif nxt in WORD_JOINERS and pos + 1 < length and text[pos + 1].isalpha():
                    pos += 2
                else:
                    break
            kind = TokenKind.WORD
        else:
            pos += 1
            kind = TokenKind.BOUNDARY if ch == BOUNDARY_MARK else TokenKind.PUNCT
        tokens.append(
            Token(index=len(tokens), raw=text[start:pos], kind=kind, start=start, end=pos)
        )
    return tokens


def word_tokens(tokens: List[Token]) -> List[Token]:
    return [token for token in tokens if token.is_word]

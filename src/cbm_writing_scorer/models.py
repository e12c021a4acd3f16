from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class TokenKind(str, Enum):
    WORD = "WORD"
    PUNCT = "PUNCT"
    BOUNDARY = "BOUNDARY"


class TriState(str, Enum):
    """Reviewer-facing verdict shared by words and boundaries."""

    OK = "ok"
    MAYBE = "maybe"
    BAD = "bad"


class InsertionReason(str, Enum):
    CAPITAL_AFTER_SPACE = "CapitalAfterSpace"
    PARAGRAPH_END = "ParagraphEnd"
    GRAMMAR_CHECKER = "GrammarChecker"


class IssueCategory(str, Enum):
    SPELLING = "SPELLING"
    GRAMMAR = "GRAMMAR"
    PUNCTUATION = "PUNCTUATION"


class EditType(str, Enum):
    INSERT = "INSERT"
    MODIFY = "MODIFY"
    DELETE = "DELETE"


@dataclass(frozen=True, slots=True)
class Document:
    """A writing sample submitted for scoring."""

    doc_id: str
    text: str


@dataclass(frozen=True, slots=True)
class Token:
    """A token and its inclusive-exclusive character offsets."""

    index: int
    raw: str
    kind: TokenKind
    start: int
    end: int

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD


@dataclass(slots=True)
class TokenModel:
    """Token plus the review state shown to the scorer."""

    token: Token
    state: TriState = TriState.OK
    removed: bool = False

    @property
    def index(self) -> int:
        return self.token.index

    @property
    def raw(self) -> str:
        return self.token.raw

    @property
    def is_word(self) -> bool:
        return self.token.is_word


@dataclass(frozen=True, slots=True)
class VirtualTerminalInsertion:
    """A proposed, not materialized, sentence-ending mark at a boundary."""

    before_b_index: int
    char: str
    reason: InsertionReason
    message: str
    at: int | None = None


@dataclass(frozen=True, slots=True)
class GrammarIssue:
    """Normalized issue reported by an external grammar checker."""

    offset: int
    length: int
    category: IssueCategory
    rule_id: str = ""
    message: str = ""
    replacements: Tuple[str, ...] = ()
    edit_type: EditType = EditType.MODIFY

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True, slots=True)
class CwsPair:
    """A candidate writing sequence between two writing units."""

    boundary_index: int
    left: int | None
    right: int
    eligible: bool
    valid: bool
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class BoundaryStatus:
    status: TriState
    manual_override: bool = False
    removed: bool = False


@dataclass(frozen=True, slots=True)
class DisplayToken:
    """Token decorated with its severity and an optional overlay text."""

    token: Token
    severity: TriState
    overlay: str | None = None
    removed: bool = False


@dataclass(frozen=True, slots=True)
class AuditRow:
    """One flagged issue, in the shape used by CSV exports."""

    tag: str
    message: str
    span: Tuple[int, int]
    replacement: str = ""


@dataclass(slots=True)
class IssueMapping:
    """Result of projecting grammar issues onto a token stream."""

    token_severity: Dict[int, TriState] = field(default_factory=dict)
    insertions: List[VirtualTerminalInsertion] = field(default_factory=list)
    overlays: Dict[int, str] = field(default_factory=dict)
    audit_rows: List[AuditRow] = field(default_factory=list)
    dropped: int = 0


@dataclass(frozen=True, slots=True)
class KPI:
    """Curriculum-Based Measurement indicators for a writing sample."""

    tww: int
    wsc: int
    cws: int
    eligible_boundaries: int
    pct_cws: int
    cws_per_minute: float


@dataclass(frozen=True, slots=True)
class RubricScore:
    """Rule-based score of raw text, before any reviewer input."""

    tww: int
    wsc: int
    cws: int
    eligible_boundaries: int
    insertions: List[VirtualTerminalInsertion] = field(default_factory=list)

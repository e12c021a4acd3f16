"""
Per-boundary review state with manual overrides, removals and undo.

Automatic states are derived from scratch on every recompute; manual states
recorded by the reviewer are kept in explicit dicts keyed by index and are
replayed over the fresh defaults as long as their index still exists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Union

from .models import BoundaryStatus, Token, TokenModel, TriState, VirtualTerminalInsertion

logger = logging.getLogger(__name__)

_CYCLE = {TriState.OK: TriState.MAYBE, TriState.MAYBE: TriState.BAD, TriState.BAD: TriState.OK}


def next_state(state: TriState) -> TriState:
    """Reviewer cycling order: ok -> maybe -> bad -> ok."""
    return _CYCLE[state]


@dataclass(frozen=True, slots=True)
class RemoveToken:
    index: int
    type: str = "remove-token"


@dataclass(frozen=True, slots=True)
class RemoveBoundary:
    index: int
    type: str = "remove-caret"


UndoAction = Union[RemoveToken, RemoveBoundary]


class BoundaryStateStore:
    """Owns the only mutable scoring state: reviewer overrides and removals."""

    def __init__(self) -> None:
        self._tokens: List[Token] = []
        self._auto_tokens: Dict[int, TriState] = {}
        self._auto_boundaries: Dict[int, TriState] = {}
        self._manual_tokens: Dict[int, TriState] = {}
        self._manual_boundaries: Dict[int, TriState] = {}
        self._removed_tokens: Set[int] = set()
        self._removed_boundaries: Set[int] = set()
        self._undo: List[UndoAction] = []

    @property
    def token_count(self) -> int:
        return len(self._tokens)

    @property
    def boundary_count(self) -> int:
        return len(self._tokens) + 1

    @property
    def overridden_boundaries(self) -> Set[int]:
        return set(self._manual_boundaries)

    @property
    def undo_stack(self) -> List[UndoAction]:
        return list(self._undo)

    def recompute(
        self,
        tokens: Sequence[Token],
        token_severity: Mapping[int, TriState] | None = None,
        insertions: Iterable[VirtualTerminalInsertion] = (),
    ) -> None:
        """
        Derive fresh defaults for a token snapshot and replay reviewer state.

        A proposed insertion makes its boundary ``bad``; a ``bad`` word makes
        both of its flanking boundaries ``bad``. Manual states, removals and
        undo entries whose index no longer exists are dropped.
        """
        self._tokens = list(tokens)
        severity = token_severity or {}
        self._auto_tokens = {
            token.index: severity.get(token.index, TriState.OK)
            for token in self._tokens
            if token.is_word
        }
        self._auto_boundaries = {}
        for insertion in insertions:
            if 0 <= insertion.before_b_index <= len(self._tokens):
                self._auto_boundaries[insertion.before_b_index] = TriState.BAD
        for index, state in self._auto_tokens.items():
            if state is TriState.BAD:
                self._auto_boundaries[index] = TriState.BAD
                self._auto_boundaries[index + 1] = TriState.BAD
        self._rebase()

    def _rebase(self) -> None:
        """Drop reviewer state that points past the current snapshot."""
        token_count = len(self._tokens)
        before = len(self._manual_tokens) + len(self._manual_boundaries) + len(self._undo)
        self._manual_tokens = {
            idx: state
            for idx, state in self._manual_tokens.items()
            if idx < token_count and self._tokens[idx].is_word
        }
        self._manual_boundaries = {
            idx: state for idx, state in self._manual_boundaries.items() if idx <= token_count
        }
        self._removed_tokens = {idx for idx in self._removed_tokens if idx < token_count}
        self._removed_boundaries = {idx for idx in self._removed_boundaries if idx <= token_count}
        self._undo = [
            action
            for action in self._undo
            if (isinstance(action, RemoveToken) and action.index in self._removed_tokens)
            or (isinstance(action, RemoveBoundary) and action.index in self._removed_boundaries)
        ]
        after = len(self._manual_tokens) + len(self._manual_boundaries) + len(self._undo)
        if after < before:
            logger.debug("Dropped %d stale reviewer entries", before - after)

    def token_state(self, index: int) -> TriState:
        self._check_token(index)
        if index in self._manual_tokens:
            return self._manual_tokens[index]
        return self._auto_tokens.get(index, TriState.OK)

    def boundary_state(self, index: int) -> BoundaryStatus:
        self._check_boundary(index)
        if index in self._manual_boundaries:
            status = self._manual_boundaries[index]
        else:
            status = self._auto_boundaries.get(index, TriState.OK)
        return BoundaryStatus(
            status=status,
            manual_override=index in self._manual_boundaries,
            removed=index in self._removed_boundaries,
        )

    def click_token(self, index: int) -> TriState:
        """Cycle a word and force both of its boundaries to the new state."""
        self._check_token(index)
        if not self._tokens[index].is_word:
            raise ValueError(f"Token {index} is not a word")
        new_state = next_state(self.token_state(index))
        self._manual_tokens[index] = new_state
        self._manual_boundaries[index] = new_state
        self._manual_boundaries[index + 1] = new_state
        return new_state

    def click_boundary(self, index: int) -> TriState:
        new_state = next_state(self.boundary_state(index).status)
        self._manual_boundaries[index] = new_state
        return new_state

    def clear_token_override(self, index: int) -> None:
        self._check_token(index)
        self._manual_tokens.pop(index, None)

    def clear_boundary_override(self, index: int) -> None:
        self._check_boundary(index)
        self._manual_boundaries.pop(index, None)

    def remove_token(self, index: int) -> RemoveToken | None:
        self._check_token(index)
        if index in self._removed_tokens:
            return None
        self._removed_tokens.add(index)
        action = RemoveToken(index)
        self._undo.append(action)
        return action

    def remove_boundary(self, index: int) -> RemoveBoundary | None:
        self._check_boundary(index)
        if index in self._removed_boundaries:
            return None
        self._removed_boundaries.add(index)
        action = RemoveBoundary(index)
        self._undo.append(action)
        return action

    def undo(self) -> UndoAction | None:
        if not self._undo:
            return None
        action = self._undo.pop()
        if isinstance(action, RemoveToken):
            self._removed_tokens.discard(action.index)
        else:
            self._removed_boundaries.discard(action.index)
        return action

    def token_models(self) -> List[TokenModel]:
        return [
            TokenModel(
                token=token,
                state=self.token_state(token.index),
                removed=token.index in self._removed_tokens,
            )
            for token in self._tokens
        ]

    def boundary_states(self) -> List[BoundaryStatus]:
        return [self.boundary_state(idx) for idx in range(self.boundary_count)]

    def _check_token(self, index: int) -> None:
        if not 0 <= index < len(self._tokens):
            raise ValueError(f"Token index {index} out of range [0, {len(self._tokens)})")

    def _check_boundary(self, index: int) -> None:
        if not 0 <= index <= len(self._tokens):
            raise ValueError(f"Boundary index {index} out of range [0, {len(self._tokens)}]")

"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from capitalist_chess.core.move import Turn
    from capitalist_chess.game.state import GameState

CancelCheck = Callable[[], bool]


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single turn computation.

    ``max_depth`` counts whole turns.  The remaining fields bound the turn
    builder: how many actions a candidate turn may hold, how many actions
    are expanded at each step and how many candidate turns survive.
    """

    max_depth: int = 4
    max_turn_actions: int = 2
    action_branching: int = 6
    max_candidate_turns: int = 8

    def __post_init__(self) -> None:
        for name in (
            "max_depth",
            "max_turn_actions",
            "action_branching",
            "max_candidate_turns",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search."""

    best_turn: Turn | None
    score: int
    depth: int
    nodes: int


class IEngine(Protocol):
    """Protocol for engines choosing a whole turn."""

    def search(
        self,
        state: GameState,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...

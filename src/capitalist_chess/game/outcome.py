"""Game result and turn bookkeeping value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from capitalist_chess.core.enums import Color, WinReason
from capitalist_chess.core.move import Turn


class TurnPhase(Enum):
    """Where the turn state machine currently is."""

    AWAITING_MOVES = auto()
    TURN_SETTLED = auto()  # transient: income credited, side not yet flipped
    GAME_OVER = auto()


@dataclass(frozen=True, slots=True)
class Outcome:
    """A finished game.  Every game ends with a winner."""

    winner: Color
    reason: WinReason

    @property
    def loser(self) -> Color:
        return self.winner.opposite

    def __str__(self) -> str:
        return f"{self.winner} wins ({self.reason})"


@dataclass(frozen=True, slots=True)
class TurnRecord:
    """A completed turn in the history."""

    color: Color
    actions: Turn
    spent: int
    income: int

"""Exception taxonomy shared by the rules, economy and search layers.

Every error is recoverable by the caller: validation always runs before any
mutation, so a rejected action leaves the game state exactly as it was.
"""

from __future__ import annotations


class CapitalistChessError(Exception):
    """Base class for all errors raised by this package."""


class IllegalSquare(CapitalistChessError, ValueError):
    """A square index or name lies outside the 8x8 board."""


class IllegalMove(CapitalistChessError):
    """The action breaks a board rule (independent of price)."""


class OccupiedSquare(IllegalMove):
    """A purchase targets a square that already holds a piece."""


class EmptySquare(IllegalMove):
    """A relocation starts from a square without a piece of the mover."""


class WrongHomeRow(IllegalMove):
    """A purchase targets a square outside the buyer's two home rows."""


class SelfCheck(IllegalMove):
    """A relocation would leave the mover's own king attacked."""


class PurchaseWhileInCheck(IllegalMove):
    """Purchases are forbidden while the buyer's king is in check."""


class DuplicateKing(IllegalMove):
    """A side may own at most one king at a time."""


class InsufficientFunds(CapitalistChessError):
    """The bank cannot cover the price of the action."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Insufficient funds: need {required}¢, have {available}¢"
        )
        self.required = required
        self.available = available


class NoLegalTurns(CapitalistChessError):
    """The side to move has no affordable legal action."""


class GameAlreadyOver(CapitalistChessError):
    """The game has a result and accepts no further actions."""


class InvalidNotation(CapitalistChessError, ValueError):
    """Text could not be decoded into an action or turn."""

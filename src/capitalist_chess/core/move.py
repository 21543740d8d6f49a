"""Actions a side can pay for: relocating a piece or buying a new one.

A turn is an ordered, non-empty sequence of actions by one side.  The
market prices every action of the sequence separately.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from capitalist_chess.core.enums import MoveFlag, PieceType
from capitalist_chess.core.piece import PIECE_LETTERS
from capitalist_chess.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Relocate:
    """Move an on-board piece; written ``e2e4`` or ``e7e8q``.

    A relocation is identified by its squares and promotion piece.  The flag
    only records what the move does on a given board, so it takes no part in
    equality: ``Relocate(E2, E4)`` equals the generated double step.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = field(default=MoveFlag.NORMAL, compare=False)
    promotion: PieceType | None = None

    @property
    def is_promotion(self) -> bool:
        return self.flag == MoveFlag.PROMOTION and self.promotion is not None

    def __str__(self) -> str:
        suffix = PIECE_LETTERS[self.promotion].lower() if self.promotion else ""
        return square_name(self.from_sq) + square_name(self.to_sq) + suffix


@dataclass(frozen=True, slots=True)
class Purchase:
    """Buy *piece_type* onto an empty home-row square; written ``$Ne1``."""

    piece_type: PieceType
    to_sq: Square

    def __str__(self) -> str:
        return f"${PIECE_LETTERS[self.piece_type]}{square_name(self.to_sq)}"


Action: TypeAlias = Relocate | Purchase
Turn: TypeAlias = tuple[Action, ...]

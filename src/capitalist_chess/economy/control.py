"""Sector-control policies.

Income depends on which color *controls* a sector.  The criterion is a
pluggable strategy so the market's pricing logic never has to change when
the rule does.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from capitalist_chess.core.enums import Color, PieceType

if TYPE_CHECKING:
    from capitalist_chess.core.board import Board
    from capitalist_chess.core.sector import Sector


class SectorControlPolicy(Protocol):
    """Decides which color, if any, controls a sector."""

    def controller(self, board: Board, sector: Sector) -> Color | None: ...


def _majority(white: float, black: float) -> Color | None:
    if white > black:
        return Color.WHITE
    if black > white:
        return Color.BLACK
    return None


@dataclass(frozen=True, slots=True)
class PieceCountControl:
    """Strictly more own pieces on the sector's four cells wins it.

    Ties, including an empty sector, leave it uncontrolled.
    """

    def controller(self, board: Board, sector: Sector) -> Color | None:
        return _majority(
            board.count_within(Color.WHITE, sector.mask),
            board.count_within(Color.BLACK, sector.mask),
        )


# Weights in hundredths of a pawn.
MATERIAL_WEIGHTS: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 300,
    PieceType.BISHOP: 315,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 10_000,
}


@dataclass(frozen=True, slots=True)
class MaterialControl:
    """Strictly more summed material on the sector's cells wins it."""

    def controller(self, board: Board, sector: Sector) -> Color | None:
        white, black = (
            sum(MATERIAL_WEIGHTS[p.piece_type] for p in board.pieces_within(color, sector.mask))
            for color in Color
        )
        return _majority(white, black)

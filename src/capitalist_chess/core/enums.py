"""Enumerations shared by the rules, the market and the search."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """The two sides; white acts first.  Values double as list indexes."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveFlag(IntEnum):
    """What a relocation does beyond moving one piece."""

    NORMAL = 0
    DOUBLE_PAWN = auto()
    EN_PASSANT = auto()
    CASTLE_KINGSIDE = auto()
    CASTLE_QUEENSIDE = auto()
    PROMOTION = auto()


class CastlingRights(IntFlag):
    NONE = 0
    WHITE_KINGSIDE = 1
    WHITE_QUEENSIDE = 2
    BLACK_KINGSIDE = 4
    BLACK_QUEENSIDE = 8

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH


class WinReason(IntEnum):
    """Why a game ended.  The variant has no draws."""

    CHECKMATE = auto()
    NO_PIECES = auto()
    BANKRUPT = auto()

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

"""Piece value object and its one-letter spellings."""

from __future__ import annotations

from dataclasses import dataclass

from capitalist_chess.core.enums import Color, PieceType

# Indexed by PieceType - 1.
_LETTERS = "PNBRQK"
_WHITE_GLYPHS = "♙♘♗♖♕♔"
_BLACK_GLYPHS = "♟♞♝♜♛♚"

PIECE_LETTERS: dict[PieceType, str] = {pt: _LETTERS[pt - 1] for pt in PieceType}


def piece_type_from_letter(letter: str) -> PieceType:
    """Case-insensitive ``N`` -> ``KNIGHT``; raises ``ValueError`` otherwise."""
    index = _LETTERS.find(letter.upper()) if len(letter) == 1 else -1
    if index < 0:
        raise ValueError(f"Invalid piece letter: {letter!r}")
    return PieceType(index + 1)


@dataclass(frozen=True, slots=True)
class Piece:
    """An owned piece.

    Pieces carry no history, so a purchased rook is indistinguishable from
    one that has stood on the board since the start.
    """

    color: Color
    piece_type: PieceType

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """FEN letter to piece: uppercase is white, lowercase black."""
        piece_type = piece_type_from_letter(char)
        return cls(Color.WHITE if char.isupper() else Color.BLACK, piece_type)

    @property
    def letter(self) -> str:
        return PIECE_LETTERS[self.piece_type]

    @property
    def symbol(self) -> str:
        glyphs = _WHITE_GLYPHS if self.color == Color.WHITE else _BLACK_GLYPHS
        return glyphs[self.piece_type - 1]

    def __str__(self) -> str:
        return self.letter if self.color == Color.WHITE else self.letter.lower()

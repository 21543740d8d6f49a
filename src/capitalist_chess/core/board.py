"""Board: the 8x8 grid of optional pieces.

Alongside the plain 64-cell list the board keeps one occupancy mask per
piece kind, so attack tests and sector counts are a single ``&`` away.
"""

from __future__ import annotations

from capitalist_chess.core.enums import Color, PieceType
from capitalist_chess.core.piece import Piece
from capitalist_chess.core.types import Square, check_square, make_square, square_name

_HOME_LAYOUT = "RNBQKBNR"


def _iter_bits(mask: int) -> list[Square]:
    out: list[Square] = []
    while mask:
        low = mask & -mask
        out.append(low.bit_length() - 1)
        mask ^= low
    return out


class Board:
    """Grid of cells, each empty or holding one owned piece.

    Any placement is representable, including a side with no king or with
    no pieces at all; the rules layer decides what such a board means.
    """

    __slots__ = ("_cells", "_masks", "_kings")

    def __init__(self) -> None:
        self._cells: list[Piece | None] = [None] * 64
        self._masks: dict[Piece, int] = {}
        self._kings: dict[Color, Square] = {}

    # ── Cells ────────────────────────────────────────────────────────────

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._cells[check_square(sq)]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        previous = self._cells[check_square(sq)]
        if previous == piece:
            return
        bit = 1 << sq
        if previous is not None:
            self._masks[previous] &= ~bit
            if previous.piece_type == PieceType.KING and self._kings.get(previous.color) == sq:
                del self._kings[previous.color]
        self._cells[sq] = piece
        if piece is not None:
            self._masks[piece] = self._masks.get(piece, 0) | bit
            if piece.piece_type == PieceType.KING:
                self._kings[piece.color] = sq

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    def occupied(self) -> list[tuple[Square, Piece]]:
        """Every occupied cell, a1 first."""
        return [(sq, p) for sq, p in enumerate(self._cells) if p is not None]

    # ── Masks and counts ─────────────────────────────────────────────────

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self._masks.get(Piece(color, piece_type), 0)

    def all_pieces_bitboard(self, color: Color) -> int:
        mask = 0
        for piece_type in PieceType:
            mask |= self.pieces_bitboard(color, piece_type)
        return mask

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        return _iter_bits(self.pieces_bitboard(color, piece_type))

    def all_pieces(self, color: Color) -> list[Square]:
        return _iter_bits(self.all_pieces_bitboard(color))

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return self.pieces_bitboard(color, piece_type) != 0

    def piece_count(self, color: Color) -> int:
        return self.all_pieces_bitboard(color).bit_count()

    def count_within(self, color: Color, mask: int) -> int:
        """How many of *color*'s pieces stand on the squares of *mask*."""
        return (self.all_pieces_bitboard(color) & mask).bit_count()

    def pieces_within(self, color: Color, mask: int) -> list[Piece]:
        return [self._cells[sq] for sq in _iter_bits(self.all_pieces_bitboard(color) & mask)]

    # ── Kings ────────────────────────────────────────────────────────────

    def has_king(self, color: Color) -> bool:
        return color in self._kings

    def king_square_or_none(self, color: Color) -> Square | None:
        return self._kings.get(color)

    def king_square(self, color: Color) -> Square:
        try:
            return self._kings[color]
        except KeyError:
            raise ValueError(f"{color} has no king on the board") from None

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def initial(cls) -> Board:
        """The usual chess set-up: pieces on ranks 1-2 and 7-8."""
        board = cls()
        for file, letter in enumerate(_HOME_LAYOUT):
            board[make_square(file, 0)] = Piece.from_char(letter)
            board[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            board[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            board[make_square(file, 7)] = Piece.from_char(letter.lower())
        return board

    def copy(self) -> Board:
        clone = Board()
        clone._cells = list(self._cells)
        clone._masks = dict(self._masks)
        clone._kings = dict(self._kings)
        return clone

    def clear(self) -> None:
        self._cells = [None] * 64
        self._masks = {}
        self._kings = {}

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        lines = []
        for rank in reversed(range(8)):
            cells = (self._cells[make_square(f, rank)] for f in range(8))
            lines.append(f"{rank + 1} " + " ".join(str(p) if p else "." for p in cells))
        lines.append("  " + " ".join(square_name(f)[0] for f in range(8)))
        return "\n".join(lines)

    # Slots and no __dict__: pickle the cells and rebuild the indexes.
    def __getstate__(self) -> list[Piece | None]:
        return self._cells

    def __setstate__(self, cells: list[Piece | None]) -> None:
        self.clear()
        for sq, piece in enumerate(cells):
            if piece is not None:
                self[sq] = piece

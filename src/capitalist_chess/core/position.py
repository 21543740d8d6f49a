"""Position: board plus rule metadata with make/unmake.

Unlike classical chess a side performs several actions per turn, so
relocations never flip :attr:`Position.side_to_move`; the turn engine calls
:meth:`Position.pass_turn` once the turn is over.
"""

from __future__ import annotations

from dataclasses import dataclass

from capitalist_chess.core.board import Board
from capitalist_chess.core.enums import CastlingRights, Color, MoveFlag, PieceType
from capitalist_chess.core.errors import (
    DuplicateKing,
    EmptySquare,
    IllegalMove,
    OccupiedSquare,
    SelfCheck,
    WrongHomeRow,
)
from capitalist_chess.core.move import Relocate
from capitalist_chess.core.move_generator import MoveGenerator
from capitalist_chess.core.piece import Piece
from capitalist_chess.core.sector import is_home_square
from capitalist_chess.core.types import (
    A1,
    A8,
    H1,
    H8,
    Square,
    check_square,
    file_of,
    make_square,
    rank_of,
    square_name,
)


@dataclass(slots=True)
class _Undo:
    """What :meth:`Position.unmake_move` needs beyond the move itself."""

    castling: CastlingRights
    en_passant: Square | None
    captured: Piece | None
    captured_on: Square


# Castling flag -> (rook's home file, rook's file after castling).
_ROOK_HOPS: dict[MoveFlag, tuple[int, int]] = {
    MoveFlag.CASTLE_KINGSIDE: (7, 5),
    MoveFlag.CASTLE_QUEENSIDE: (0, 3),
}

_RIGHTS_OF_COLOR: dict[Color, CastlingRights] = {
    Color.WHITE: CastlingRights.WHITE_BOTH,
    Color.BLACK: CastlingRights.BLACK_BOTH,
}

# A rook leaving its corner, or anything landing there, ends that right.
_RIGHTS_OF_CORNER: dict[Square, CastlingRights] = {
    A1: CastlingRights.WHITE_QUEENSIDE,
    H1: CastlingRights.WHITE_KINGSIDE,
    A8: CastlingRights.BLACK_QUEENSIDE,
    H8: CastlingRights.BLACK_KINGSIDE,
}


def _capture_square(move: Relocate) -> Square:
    if move.flag == MoveFlag.EN_PASSANT:
        return make_square(file_of(move.to_sq), rank_of(move.from_sq))
    return move.to_sq


class Position:
    """Board, side to move, castling rights and en passant target.

    :meth:`make_move` pushes an undo record that :meth:`unmake_move` pops,
    which lets the legality filter try a move and take it back.  Captured
    pieces leave the game for good.
    """

    __slots__ = ("board", "side_to_move", "castling", "en_passant", "_undo")

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self._undo: list[_Undo] = []

    # ── Raw relocation ───────────────────────────────────────────────────

    def make_move(self, move: Relocate) -> None:
        """Play *move* without legality checks."""
        board = self.board
        mover = board[move.from_sq]
        if mover is None:
            raise EmptySquare(f"No piece on {square_name(move.from_sq)}")

        captured_on = _capture_square(move)
        captured = board[captured_on]
        self._undo.append(_Undo(self.castling, self.en_passant, captured, captured_on))

        board[captured_on] = None
        board[move.from_sq] = None
        board[move.to_sq] = Piece(mover.color, move.promotion) if move.is_promotion else mover

        hop = _ROOK_HOPS.get(move.flag)
        if hop is not None:
            rank = rank_of(move.from_sq)
            home, dest = make_square(hop[0], rank), make_square(hop[1], rank)
            board[dest], board[home] = board[home], None

        # The target survives until the next relocation by either side.
        self.en_passant = (
            (move.from_sq + move.to_sq) // 2 if move.flag == MoveFlag.DOUBLE_PAWN else None
        )

        if mover.piece_type == PieceType.KING:
            self.castling &= ~_RIGHTS_OF_COLOR[mover.color]
        # A king bought later must not inherit the lost king's rights.
        if captured is not None and captured.piece_type == PieceType.KING:
            self.castling &= ~_RIGHTS_OF_COLOR[captured.color]
        for corner in (move.from_sq, move.to_sq):
            self.castling &= ~_RIGHTS_OF_CORNER.get(corner, CastlingRights.NONE)

    def unmake_move(self, move: Relocate) -> None:
        """Take back the most recent :meth:`make_move` of *move*."""
        undo = self._undo.pop()
        board = self.board
        moved = board[move.to_sq]
        assert moved is not None

        hop = _ROOK_HOPS.get(move.flag)
        if hop is not None:
            rank = rank_of(move.from_sq)
            home, dest = make_square(hop[0], rank), make_square(hop[1], rank)
            board[home], board[dest] = board[dest], None

        board[move.to_sq] = None
        board[move.from_sq] = (
            Piece(moved.color, PieceType.PAWN) if move.flag == MoveFlag.PROMOTION else moved
        )
        board[undo.captured_on] = undo.captured
        self.castling = undo.castling
        self.en_passant = undo.en_passant

    def place_piece(self, piece: Piece, sq: Square) -> None:
        """Put a freshly purchased *piece* on empty square *sq*.

        The new piece has no move history: castling rights and the en passant
        target are left untouched.
        """
        if self.board[sq] is not None:
            raise OccupiedSquare(f"Square {square_name(sq)} is occupied")
        self.board[sq] = piece

    # ── Validated mutations ──────────────────────────────────────────────

    def resolve_relocation(self, move: Relocate) -> Relocate | None:
        """The generated relocation matching *move*'s squares and promotion.

        The result carries the flag the board implies (double step, castling,
        en passant, promotion).  A pawn reaching the last rank with no
        promotion piece given becomes a queen.  ``None`` when the side to move
        has no such relocation, ignoring king safety.
        """
        for candidate in MoveGenerator(self).generate_pseudo_legal_moves():
            if candidate.from_sq != move.from_sq or candidate.to_sq != move.to_sq:
                continue
            wanted = move.promotion
            if wanted is None and candidate.promotion is not None:
                wanted = PieceType.QUEEN
            if candidate.promotion == wanted:
                return candidate
        return None

    def apply_relocation(self, move: Relocate) -> Relocate:
        """Play *move* for the side to move after checking board legality.

        Returns the relocation actually played, flag filled in.  Raises
        :class:`EmptySquare` when the origin holds no piece of the mover,
        :class:`SelfCheck` when the mover's king would be left attacked, and
        :class:`IllegalMove` for any other rule violation.
        """
        color = self.side_to_move
        piece = self.board[move.from_sq]
        if piece is None or piece.color != color:
            raise EmptySquare(f"No {color} piece on {square_name(move.from_sq)}")
        resolved = self.resolve_relocation(move)
        if resolved is None:
            raise IllegalMove(f"Illegal relocation for {piece.piece_type.name.lower()}: {move}")
        if MoveGenerator(self).leaves_king_attacked(resolved):
            raise SelfCheck(f"{resolved} leaves the {color} king in check")
        self.make_move(resolved)
        return resolved

    def apply_purchase(self, piece_type: PieceType, color: Color, sq: Square) -> None:
        """Place a newly bought *piece_type* for *color* on *sq*."""
        check_square(sq)
        if not is_home_square(sq, color):
            raise WrongHomeRow(f"{square_name(sq)} is outside the {color} home rows")
        if self.board[sq] is not None:
            raise OccupiedSquare(f"Square {square_name(sq)} is occupied")
        if piece_type == PieceType.KING and self.board.has_king(color):
            raise DuplicateKing(f"{color} already has a king")
        self.place_piece(Piece(color, piece_type), sq)

    def pass_turn(self) -> None:
        """Hand the move to the other side."""
        self.side_to_move = self.side_to_move.opposite

    def copy(self) -> Position:
        """Independent copy with an empty undo stack."""
        return Position(self.board.copy(), self.side_to_move, self.castling, self.en_passant)

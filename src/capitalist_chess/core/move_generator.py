"""Relocation and purchase generation + attack detection.

Geometry is precomputed once per square: step targets for knights, kings
and pawn captures (as lists and as bit masks), and rays for the sliders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from capitalist_chess.core.enums import CastlingRights, Color, MoveFlag, PieceType
from capitalist_chess.core.errors import EmptySquare
from capitalist_chess.core.move import Purchase, Relocate
from capitalist_chess.core.sector import home_squares
from capitalist_chess.core.types import Square, check_square, file_of, rank_of, square_name

if TYPE_CHECKING:
    from capitalist_chess.core.position import Position

_Deltas = tuple[tuple[int, int], ...]

_DIAGONALS: _Deltas = ((1, 1), (1, -1), (-1, 1), (-1, -1))
_ORTHOGONALS: _Deltas = ((1, 0), (-1, 0), (0, 1), (0, -1))
_KNIGHT_JUMPS: _Deltas = ((1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2))

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)
PURCHASABLE_TYPES: tuple[PieceType, ...] = tuple(PieceType)


# ── Lookup tables ────────────────────────────────────────────────────────────


def _walk(sq: Square, df: int, dr: int, limit: int) -> tuple[Square, ...]:
    """Squares reached from *sq* by repeating (df, dr) at most *limit* times."""
    f, r = file_of(sq), rank_of(sq)
    out: list[Square] = []
    for _ in range(limit):
        f, r = f + df, r + dr
        if not (0 <= f < 8 and 0 <= r < 8):
            break
        out.append(r * 8 + f)
    return tuple(out)


def _steps(deltas: _Deltas) -> tuple[tuple[Square, ...], ...]:
    return tuple(
        tuple(t for df, dr in deltas for t in _walk(sq, df, dr, 1)) for sq in range(64)
    )


def _rays(deltas: _Deltas) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    return tuple(tuple(_walk(sq, df, dr, 7) for df, dr in deltas) for sq in range(64))


def _masks(table: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    return tuple(sum(1 << t for t in targets) for targets in table)


_KNIGHT_STEPS = _steps(_KNIGHT_JUMPS)
_KING_STEPS = _steps(_DIAGONALS + _ORTHOGONALS)
_KNIGHT_MASKS = _masks(_KNIGHT_STEPS)
_KING_MASKS = _masks(_KING_STEPS)

# Squares a pawn of each color hits from each square.
_PAWN_HITS: dict[Color, tuple[tuple[Square, ...], ...]] = {
    Color.WHITE: _steps(((-1, 1), (1, 1))),
    Color.BLACK: _steps(((-1, -1), (1, -1))),
}
# Pawns of color C that hit a square stand where a C.opposite pawn would hit.
_PAWN_ATTACKERS: dict[Color, tuple[int, ...]] = {
    color: _masks(_PAWN_HITS[color.opposite]) for color in Color
}

_DIAGONAL_RAYS = _rays(_DIAGONALS)
_ORTHOGONAL_RAYS = _rays(_ORTHOGONALS)
_SLIDER_RAYS = {
    PieceType.BISHOP: _DIAGONAL_RAYS,
    PieceType.ROOK: _ORTHOGONAL_RAYS,
    PieceType.QUEEN: tuple(d + o for d, o in zip(_DIAGONAL_RAYS, _ORTHOGONAL_RAYS)),
}

# Per color: forward step, double-step rank, promotion rank, and the rank an
# en passant target must sit on for this color to take it.
_PAWN_RANKS: dict[Color, tuple[int, int, int, int]] = {
    Color.WHITE: (8, 1, 7, 5),
    Color.BLACK: (-8, 6, 0, 2),
}

# (white right, black right, flag, king destination file, files that must be
#  empty, files the king crosses that must not be attacked, rook file).
_CASTLES = (
    (CastlingRights.WHITE_KINGSIDE, CastlingRights.BLACK_KINGSIDE, MoveFlag.CASTLE_KINGSIDE, 6, (5, 6), (5, 6), 7),
    (CastlingRights.WHITE_QUEENSIDE, CastlingRights.BLACK_QUEENSIDE, MoveFlag.CASTLE_QUEENSIDE, 2, (1, 2, 3), (2, 3), 0),
)


class MoveGenerator:
    """Relocations, purchases and attack queries for one :class:`Position`.

    Legality filtering plays each move on the position and takes it back, so
    the position is unchanged once a call returns.  Prices play no part here;
    affordability belongs to the turn engine.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # ── Relocations ──────────────────────────────────────────────────────

    def generate_legal_moves(self) -> list[Relocate]:
        """Relocations for the side to move that keep its king safe."""
        color = self._pos.side_to_move
        return [m for m in self.generate_pseudo_legal_moves(color) if not self._exposes(m, color)]

    def generate_pseudo_legal_moves(self, color: Color | None = None) -> list[Relocate]:
        """Relocations by piece movement rules alone; may leave the king attacked."""
        color = self._pos.side_to_move if color is None else color
        moves: list[Relocate] = []
        for sq in self._board.all_pieces(color):
            self._piece_moves(sq, moves)
        return moves

    def generate_piece_moves(self, sq: Square) -> list[Relocate]:
        """Legal relocations of the piece on *sq*, whoever owns it."""
        piece = self._board[sq]
        if piece is None:
            raise EmptySquare(f"No piece on {square_name(sq)}")
        moves: list[Relocate] = []
        self._piece_moves(sq, moves)
        return [m for m in moves if not self._exposes(m, piece.color)]

    def leaves_king_attacked(self, move: Relocate) -> bool:
        piece = self._board[move.from_sq]
        if piece is None:
            raise EmptySquare(f"No piece on {square_name(move.from_sq)}")
        return self._exposes(move, piece.color)

    # ── Purchases ────────────────────────────────────────────────────────

    def generate_purchases(self, color: Color | None = None) -> list[Purchase]:
        """Every placement *color* may buy, ignoring price.

        Nothing may be bought while in check.  A king is only on offer to a
        side that currently has none.
        """
        color = self._pos.side_to_move if color is None else color
        if self.is_in_check(color):
            return []
        kinds = [pt for pt in PURCHASABLE_TYPES
                 if pt != PieceType.KING or not self._board.has_king(color)]
        return [
            Purchase(pt, sq)
            for sq in home_squares(color)
            if self._board.is_empty(sq)
            for pt in kinds
        ]

    # ── Attacks ──────────────────────────────────────────────────────────

    def is_in_check(self, color: Color) -> bool:
        """Whether *color*'s king is attacked; a side without a king never is."""
        king = self._board.king_square_or_none(color)
        return king is not None and self.is_square_attacked(king, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        check_square(sq)
        board = self._board
        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_MASKS[sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_MASKS[sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.PAWN) & _PAWN_ATTACKERS[by_color][sq]:
            return True
        for slider, rays in ((PieceType.BISHOP, _DIAGONAL_RAYS), (PieceType.ROOK, _ORTHOGONAL_RAYS)):
            for ray in rays[sq]:
                blocker = self._first_piece(ray)
                if (
                    blocker is not None
                    and board[blocker].color == by_color
                    and board[blocker].piece_type in (slider, PieceType.QUEEN)
                ):
                    return True
        return False

    def generate_attacks(self, color: Color) -> set[Square]:
        """Every square *color* hits, ignoring the safety of its own king."""
        board = self._board
        hit: set[Square] = set()
        for sq in board.all_pieces(color):
            piece_type = board[sq].piece_type
            if piece_type == PieceType.PAWN:
                hit.update(_PAWN_HITS[color][sq])
            elif piece_type == PieceType.KNIGHT:
                hit.update(_KNIGHT_STEPS[sq])
            elif piece_type == PieceType.KING:
                hit.update(_KING_STEPS[sq])
            else:
                for ray in _SLIDER_RAYS[piece_type][sq]:
                    blocker = self._first_piece(ray)
                    hit.update(ray if blocker is None else ray[: ray.index(blocker) + 1])
        return hit

    # ── Internals ────────────────────────────────────────────────────────

    def _first_piece(self, ray: tuple[Square, ...]) -> Square | None:
        board = self._board
        return next((t for t in ray if board[t] is not None), None)

    def _exposes(self, move: Relocate, color: Color) -> bool:
        self._pos.make_move(move)
        try:
            return self.is_in_check(color)
        finally:
            self._pos.unmake_move(move)

    def _piece_moves(self, sq: Square, moves: list[Relocate]) -> None:
        piece = self._board[sq]
        assert piece is not None
        kind, color = piece.piece_type, piece.color
        if kind == PieceType.PAWN:
            self._pawn_moves(sq, color, moves)
            return
        if kind in _SLIDER_RAYS:
            targets = [t for ray in _SLIDER_RAYS[kind][sq] for t in self._ray_reach(ray, color)]
        else:
            targets = [
                t for t in (_KNIGHT_STEPS if kind == PieceType.KNIGHT else _KING_STEPS)[sq]
                if self._board[t] is None or self._board[t].color != color
            ]
        moves.extend(Relocate(sq, t) for t in targets)
        if kind == PieceType.KING:
            self._castling_moves(sq, color, moves)

    def _ray_reach(self, ray: tuple[Square, ...], color: Color) -> tuple[Square, ...]:
        """Prefix of *ray* up to and including the first enemy piece."""
        blocker = self._first_piece(ray)
        if blocker is None:
            return ray
        stop = ray.index(blocker)
        return ray[: stop + 1] if self._board[blocker].color != color else ray[:stop]

    def _pawn_moves(self, sq: Square, color: Color, moves: list[Relocate]) -> None:
        board = self._board
        step, double_rank, last_rank, ep_rank = _PAWN_RANKS[color]

        def push(to_sq: Square, flag: MoveFlag = MoveFlag.NORMAL) -> None:
            if rank_of(to_sq) == last_rank:
                moves.extend(Relocate(sq, to_sq, MoveFlag.PROMOTION, pt) for pt in PROMOTION_TYPES)
            else:
                moves.append(Relocate(sq, to_sq, flag))

        ahead = sq + step
        if 0 <= ahead < 64 and board[ahead] is None:
            push(ahead)
            if rank_of(sq) == double_rank and board[ahead + step] is None:
                push(ahead + step, MoveFlag.DOUBLE_PAWN)

        ep = self._pos.en_passant
        for target in _PAWN_HITS[color][sq]:
            victim = board[target]
            if victim is not None and victim.color != color:
                push(target)
            elif victim is None and target == ep and rank_of(ep) == ep_rank:
                push(target, MoveFlag.EN_PASSANT)

    def _castling_moves(self, king_sq: Square, color: Color, moves: list[Relocate]) -> None:
        base = 0 if color == Color.WHITE else 56
        if king_sq != base + 4 or self.is_in_check(color):
            return
        board = self._board
        enemy = color.opposite
        for white_right, black_right, flag, dest, empty, safe, rook_file in _CASTLES:
            right = white_right if color == Color.WHITE else black_right
            rook = board[base + rook_file]
            if not self._pos.castling & right or rook is None:
                continue
            if rook.color != color or rook.piece_type != PieceType.ROOK:
                continue
            if any(board[base + f] is not None for f in empty):
                continue
            if any(self.is_square_attacked(base + f, enemy) for f in safe):
                continue
            moves.append(Relocate(king_sq, base + dest, flag))

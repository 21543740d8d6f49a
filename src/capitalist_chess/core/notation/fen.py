"""FEN set-up strings.

Placement, side, castling and en passant carry meaning here.  The two move
clocks are accepted and ignored since the variant has no draw rules, and
they are always written back as ``0 1``.
"""

from __future__ import annotations

import re

from capitalist_chess.core.board import Board
from capitalist_chess.core.enums import CastlingRights, Color, PieceType
from capitalist_chess.core.errors import IllegalSquare, InvalidNotation
from capitalist_chess.core.piece import Piece
from capitalist_chess.core.position import Position
from capitalist_chess.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_ORDER = "KQkq"
_CASTLING_BITS = (
    CastlingRights.WHITE_KINGSIDE,
    CastlingRights.WHITE_QUEENSIDE,
    CastlingRights.BLACK_KINGSIDE,
    CastlingRights.BLACK_QUEENSIDE,
)
_SIDES = {"w": Color.WHITE, "b": Color.BLACK}
_RUN_RE = re.compile(r"[1-8]|[^1-8]")


def position_from_fen(fen: str) -> Position:
    """Build a :class:`Position`; any malformed field raises :class:`InvalidNotation`."""
    fields = fen.split()
    if len(fields) not in (4, 5, 6):
        raise InvalidNotation(f"FEN needs 4 to 6 fields, got {len(fields)}: {fen!r}")
    board = _read_placement(fields[0])
    side = _SIDES.get(fields[1])
    if side is None:
        raise InvalidNotation(f"Unknown side to move {fields[1]!r}")
    castling = _read_castling(fields[2])
    en_passant = _read_en_passant(fields[3], side)
    return Position(board, side, castling, en_passant)


def position_to_fen(pos: Position) -> str:
    side = "w" if pos.side_to_move == Color.WHITE else "b"
    castling = "".join(
        ch for ch, bit in zip(_CASTLING_ORDER, _CASTLING_BITS) if pos.castling & bit
    )
    ep = "-" if pos.en_passant is None else square_name(pos.en_passant)
    return f"{_write_placement(pos.board)} {side} {castling or '-'} {ep} 0 1"


# ── Fields ───────────────────────────────────────────────────────────────


def _read_placement(text: str) -> Board:
    rows = text.split("/")
    if len(rows) != 8:
        raise InvalidNotation(f"FEN placement needs 8 ranks, got {len(rows)}")
    board = Board()
    kings: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 0}
    for rank, row in zip(range(7, -1, -1), rows):
        file = 0
        for token in _RUN_RE.findall(row):
            if token.isdigit():
                file += int(token)
                continue
            if file > 7:
                raise InvalidNotation(f"FEN rank {rank + 1} is wider than 8 files: {row!r}")
            try:
                piece = Piece.from_char(token)
            except ValueError as exc:
                raise InvalidNotation(str(exc)) from exc
            board[make_square(file, rank)] = piece
            if piece.piece_type == PieceType.KING:
                kings[piece.color] += 1
            file += 1
        if file != 8:
            raise InvalidNotation(f"FEN rank {rank + 1} does not span 8 files: {row!r}")
    for color, count in kings.items():
        if count > 1:
            raise InvalidNotation(f"{color} has {count} kings")
    return board


def _write_placement(board: Board) -> str:
    rows = []
    for rank in range(7, -1, -1):
        row = "".join(str(board[make_square(f, rank)] or 1) for f in range(8))
        # Collapse runs of empty cells into their length.
        rows.append(re.sub(r"1+", lambda m: str(len(m.group())), row))
    return "/".join(rows)


def _read_castling(text: str) -> CastlingRights:
    rights = CastlingRights.NONE
    if text == "-":
        return rights
    if len(set(text)) != len(text) or not set(text) <= set(_CASTLING_ORDER):
        raise InvalidNotation(f"Bad castling field {text!r}")
    for ch in text:
        rights |= _CASTLING_BITS[_CASTLING_ORDER.index(ch)]
    return rights


def _read_en_passant(text: str, side: Color) -> Square | None:
    if text == "-":
        return None
    try:
        sq = parse_square(text)
    except IllegalSquare as exc:
        raise InvalidNotation(str(exc)) from exc
    # The target sits behind a pawn the opponent just double-stepped.
    if rank_of(sq) != (5 if side == Color.WHITE else 2):
        raise InvalidNotation(f"En passant square {text!r} impossible with {side} to move")
    return sq

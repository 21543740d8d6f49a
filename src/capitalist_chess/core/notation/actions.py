"""Action and turn notation.

Tokens understood by :func:`parse_action`:

- ``e2e4`` / ``e7e8q``   relocation by squares, optional promotion letter
- ``e4``                 pawn shorthand, the origin is inferred
- ``Nf3``                piece shorthand, the origin is inferred
- ``O-O`` / ``O-O-O``    castling
- ``$Ne1``               purchase of a knight placed on e1

A turn is a whitespace-separated sequence of tokens.  Shorthand is resolved
against the legal relocations, so a pinned piece never makes a token
ambiguous.  Otherwise whether the action is legal or affordable is decided
by the game state.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from capitalist_chess.core.enums import MoveFlag, PieceType
from capitalist_chess.core.errors import InvalidNotation
from capitalist_chess.core.move import Action, Purchase, Relocate, Turn
from capitalist_chess.core.move_generator import MoveGenerator
from capitalist_chess.core.piece import Piece, piece_type_from_letter
from capitalist_chess.core.position import Position
from capitalist_chess.core.types import parse_square

_SQUARES_RE = re.compile(r"^([a-h][1-8])([a-h][1-8])([nbrqNBRQ])?$")
_SHORTHAND_RE = re.compile(r"^([NBRQK])?([a-h][1-8])(?:=?([NBRQnbrq]))?$")
_PURCHASE_RE = re.compile(r"^\$([PNBRQKpnbrqk])([a-h][1-8])$")
_CASTLE_FLAGS: dict[str, MoveFlag] = {
    "O-O": MoveFlag.CASTLE_KINGSIDE,
    "0-0": MoveFlag.CASTLE_KINGSIDE,
    "O-O-O": MoveFlag.CASTLE_QUEENSIDE,
    "0-0-0": MoveFlag.CASTLE_QUEENSIDE,
}


def parse_action(text: str, position: Position) -> Action:
    """Decode a single action token for the side to move in *position*."""
    token = text.strip()
    if not token:
        raise InvalidNotation("Empty action")

    if m := _PURCHASE_RE.match(token):
        return Purchase(piece_type_from_letter(m.group(1)), parse_square(m.group(2)))

    candidates = MoveGenerator(position).generate_pseudo_legal_moves()

    if token in _CASTLE_FLAGS:
        flag = _CASTLE_FLAGS[token]
        for move in candidates:
            if move.flag == flag:
                return move
        raise InvalidNotation(f"Castling is not available: {token!r}")

    if m := _SQUARES_RE.match(token):
        from_sq = parse_square(m.group(1))
        to_sq = parse_square(m.group(2))
        promotion = (
            piece_type_from_letter(m.group(3)) if m.group(3) is not None else None
        )
        return _resolve_squares(candidates, from_sq, to_sq, promotion)

    if m := _SHORTHAND_RE.match(token):
        piece_type = (
            piece_type_from_letter(m.group(1)) if m.group(1) else PieceType.PAWN
        )
        to_sq = parse_square(m.group(2))
        promotion = (
            piece_type_from_letter(m.group(3)) if m.group(3) is not None else None
        )
        legal = MoveGenerator(position).generate_legal_moves()
        return _resolve_shorthand(position, legal, piece_type, to_sq, promotion, token)

    raise InvalidNotation(f"Unrecognised action: {token!r}")


def parse_turn(text: str, position: Position) -> Turn:
    """Decode a whitespace-separated turn.

    Shorthand tokens are resolved against the board as it will look after
    the earlier tokens of the same turn.
    """
    tokens = text.split()
    if not tokens:
        raise InvalidNotation("A turn needs at least one action")

    scratch = position.copy()
    actions: list[Action] = []
    for token in tokens:
        action = parse_action(token, scratch)
        actions.append(action)
        _preview(scratch, action)
    return tuple(actions)


def format_action(action: Action) -> str:
    return str(action)


def format_turn(turn: Iterable[Action]) -> str:
    return " ".join(format_action(action) for action in turn)


# ── Internal helpers ─────────────────────────────────────────────────────────


def _resolve_squares(
    candidates: list[Relocate],
    from_sq: int,
    to_sq: int,
    promotion: PieceType | None,
) -> Relocate:
    matches = [m for m in candidates if m.from_sq == from_sq and m.to_sq == to_sq]
    if not matches:
        # Not a move of the side to move; let the rules engine reject it.
        return Relocate(from_sq, to_sq, promotion=promotion)
    if any(m.flag == MoveFlag.PROMOTION for m in matches):
        wanted = promotion or PieceType.QUEEN
        for move in matches:
            if move.promotion == wanted:
                return move
        raise InvalidNotation(f"Invalid promotion piece: {wanted.name.lower()}")
    if promotion is not None:
        raise InvalidNotation("Promotion given for a non-promoting move")
    return matches[0]


def _resolve_shorthand(
    position: Position,
    candidates: list[Relocate],
    piece_type: PieceType,
    to_sq: int,
    promotion: PieceType | None,
    token: str,
) -> Relocate:
    board = position.board
    origins = sorted(
        {
            m.from_sq
            for m in candidates
            if m.to_sq == to_sq
            and (piece := board[m.from_sq]) is not None
            and piece.piece_type == piece_type
        }
    )
    if not origins:
        raise InvalidNotation(f"No piece can reach the square: {token!r}")
    if len(origins) > 1:
        raise InvalidNotation(f"Ambiguous shorthand: {token!r}")
    return _resolve_squares(candidates, origins[0], to_sq, promotion)


def _preview(position: Position, action: Action) -> None:
    """Best-effort application used only to resolve later shorthand."""
    if isinstance(action, Purchase):
        if position.board.is_empty(action.to_sq):
            position.place_piece(
                Piece(position.side_to_move, action.piece_type), action.to_sq
            )
        return
    if position.board[action.from_sq] is not None:
        position.make_move(action)

"""Notation package: FEN setup and action/turn tokens."""

from capitalist_chess.core.notation.actions import (
    format_action,
    format_turn,
    parse_action,
    parse_turn,
)
from capitalist_chess.core.notation.fen import (
    STARTING_FEN,
    position_from_fen,
    position_to_fen,
)

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "parse_action",
    "parse_turn",
    "format_action",
    "format_turn",
]

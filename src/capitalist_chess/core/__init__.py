"""Core domain layer: board, geometry and rules without any economy.

Quick start::

    from capitalist_chess.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from capitalist_chess.core.board import Board
from capitalist_chess.core.enums import CastlingRights, Color, MoveFlag, PieceType, WinReason
from capitalist_chess.core.errors import (
    CapitalistChessError,
    DuplicateKing,
    EmptySquare,
    GameAlreadyOver,
    IllegalMove,
    IllegalSquare,
    InsufficientFunds,
    InvalidNotation,
    NoLegalTurns,
    OccupiedSquare,
    PurchaseWhileInCheck,
    SelfCheck,
    WrongHomeRow,
)
from capitalist_chess.core.move import Action, Purchase, Relocate, Turn
from capitalist_chess.core.move_generator import MoveGenerator
from capitalist_chess.core.notation import (
    STARTING_FEN,
    format_action,
    format_turn,
    parse_action,
    parse_turn,
    position_from_fen,
    position_to_fen,
)
from capitalist_chess.core.piece import Piece
from capitalist_chess.core.position import Position
from capitalist_chess.core.sector import NUM_SECTORS, Sector, home_squares, is_home_square
from capitalist_chess.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "MoveFlag",
    "PieceType",
    "WinReason",
    # Errors
    "CapitalistChessError",
    "IllegalSquare",
    "IllegalMove",
    "OccupiedSquare",
    "EmptySquare",
    "WrongHomeRow",
    "SelfCheck",
    "PurchaseWhileInCheck",
    "DuplicateKing",
    "InsufficientFunds",
    "NoLegalTurns",
    "GameAlreadyOver",
    "InvalidNotation",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "NUM_SECTORS",
    "Sector",
    "home_squares",
    "is_home_square",
    # Domain objects
    "Action",
    "Board",
    "Piece",
    "Position",
    "Purchase",
    "Relocate",
    "Turn",
    "MoveGenerator",
    # Notation
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "parse_action",
    "parse_turn",
    "format_action",
    "format_turn",
]

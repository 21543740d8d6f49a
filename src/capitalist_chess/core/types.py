"""Squares and coordinate helpers.

A square is a plain ``int``: ``rank * 8 + file``, so a1 is 0, h1 is 7 and
h8 is 63.  Anything outside 0..63 raises :class:`IllegalSquare`.
"""

from __future__ import annotations

from typing import TypeAlias

from capitalist_chess.core.errors import IllegalSquare

Square: TypeAlias = int

FILES = "abcdefgh"
RANKS = "12345678"


def check_square(sq: int) -> Square:
    if not is_valid_square(sq):
        raise IllegalSquare(f"Square index out of range: {sq}")
    return sq


def is_valid_square(sq: int) -> bool:
    return 0 <= sq <= 63


def make_square(file: int, rank: int) -> Square:
    if file not in range(8) or rank not in range(8):
        raise IllegalSquare(f"No square at file {file}, rank {rank}")
    return rank * 8 + file


def file_of(sq: Square) -> int:
    return sq % 8


def rank_of(sq: Square) -> int:
    return sq // 8


def square_name(sq: Square) -> str:
    """Algebraic name such as ``e4``."""
    rank, file = divmod(check_square(sq), 8)
    return FILES[file] + RANKS[rank]


def parse_square(name: str) -> Square:
    """Inverse of :func:`square_name`."""
    if len(name) == 2 and name[0] in FILES and name[1] in RANKS:
        return make_square(FILES.index(name[0]), RANKS.index(name[1]))
    raise IllegalSquare(f"Invalid square name: {name!r}")


# ── Named squares, one file per line ────────────────────────────────────────

A1, A2, A3, A4, A5, A6, A7, A8 = range(0, 64, 8)
B1, B2, B3, B4, B5, B6, B7, B8 = range(1, 64, 8)
C1, C2, C3, C4, C5, C6, C7, C8 = range(2, 64, 8)
D1, D2, D3, D4, D5, D6, D7, D8 = range(3, 64, 8)
E1, E2, E3, E4, E5, E6, E7, E8 = range(4, 64, 8)
F1, F2, F3, F4, F5, F6, F7, F8 = range(5, 64, 8)
G1, G2, G3, G4, G5, G6, G7, G8 = range(6, 64, 8)
H1, H2, H3, H4, H5, H6, H7, H8 = range(7, 64, 8)

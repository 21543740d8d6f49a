"""Sectors: the sixteen 2x2 regions that tile the board.

Sector indexes run left to right, bottom to top::

    12 13 14 15    ranks 7-8 (black home)
     8  9 10 11
     4  5  6  7
     0  1  2  3    ranks 1-2 (white home)

The four sectors around the centre (5, 6, 9, 10) are *central*; the other
twelve are *peripheral*.
"""

from __future__ import annotations

from dataclasses import dataclass

from capitalist_chess.core.enums import Color
from capitalist_chess.core.errors import IllegalSquare
from capitalist_chess.core.types import Square, check_square, file_of, rank_of

NUM_SECTORS = 16
_CENTRAL_INDEXES = frozenset({5, 6, 9, 10})


@dataclass(frozen=True, slots=True, order=True)
class Sector:
    """One 2x2 board region, identified by its index 0–15."""

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index < NUM_SECTORS:
            raise IllegalSquare(f"Sector index out of range: {self.index}")

    @classmethod
    def of(cls, sq: Square) -> Sector:
        """Sector containing *sq*."""
        check_square(sq)
        return cls((rank_of(sq) // 2) * 4 + file_of(sq) // 2)

    @classmethod
    def all(cls) -> tuple[Sector, ...]:
        return _ALL_SECTORS

    @property
    def is_central(self) -> bool:
        return self.index in _CENTRAL_INDEXES

    @property
    def is_peripheral(self) -> bool:
        return not self.is_central

    @property
    def squares(self) -> tuple[Square, ...]:
        return _SECTOR_SQUARES[self.index]

    @property
    def mask(self) -> int:
        """Bitboard of the sector's four squares."""
        return _SECTOR_MASKS[self.index]

    def is_home_for(self, color: Color) -> bool:
        if color == Color.WHITE:
            return self.index <= 3
        return self.index >= 12

    def __str__(self) -> str:
        return f"S{self.index}"


def _build_sector_squares() -> tuple[tuple[Square, ...], ...]:
    result: list[tuple[Square, ...]] = []
    for idx in range(NUM_SECTORS):
        base_rank = (idx // 4) * 2
        base_file = (idx % 4) * 2
        result.append(
            tuple(
                (base_rank + dr) * 8 + base_file + df
                for dr in range(2)
                for df in range(2)
            )
        )
    return tuple(result)


_SECTOR_SQUARES = _build_sector_squares()
_SECTOR_MASKS = tuple(
    sum(1 << sq for sq in squares) for squares in _SECTOR_SQUARES
)
_ALL_SECTORS = tuple(Sector(i) for i in range(NUM_SECTORS))


def is_home_square(sq: Square, color: Color) -> bool:
    """Whether *sq* lies in *color*'s two home rows (purchase zone)."""
    return Sector.of(sq).is_home_for(color)


def home_squares(color: Color) -> tuple[Square, ...]:
    """The sixteen squares where *color* may place purchased pieces."""
    return tuple(range(0, 16)) if color == Color.WHITE else tuple(range(48, 64))

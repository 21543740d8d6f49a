"""Economy layer: banks, prices, sector control and territory income."""

from capitalist_chess.economy.bank import Bank
from capitalist_chess.economy.control import (
    MATERIAL_WEIGHTS,
    MaterialControl,
    PieceCountControl,
    SectorControlPolicy,
)
from capitalist_chess.economy.currency import DOUBLOON, PENNY, doubloons, format_currency
from capitalist_chess.economy.market import Market

__all__ = [
    "Bank",
    "DOUBLOON",
    "MATERIAL_WEIGHTS",
    "Market",
    "MaterialControl",
    "PENNY",
    "PieceCountControl",
    "SectorControlPolicy",
    "doubloons",
    "format_currency",
]

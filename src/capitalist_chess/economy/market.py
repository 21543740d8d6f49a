"""Market: prices, territory income and charging.

The market stores no money.  It reads a :class:`Bank` and the board to work
out what an action costs and what a color earns, and it is the only place
that debits or credits a bank.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from capitalist_chess.core.enums import Color, PieceType
from capitalist_chess.core.move import Purchase
from capitalist_chess.core.sector import Sector
from capitalist_chess.economy.control import PieceCountControl, SectorControlPolicy
from capitalist_chess.economy.currency import doubloons, format_currency

if TYPE_CHECKING:
    from capitalist_chess.core.board import Board
    from capitalist_chess.core.move import Action
    from capitalist_chess.economy.bank import Bank

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Market:
    """Pricing policy.  Every amount is in pennies.

    With the defaults the n-th action of a turn costs ``10 * 2 ** (n - 1)``
    and purchase prices are Pawn 20, Knight 60, Bishop 63, Rook 100,
    Queen 180, King 2000.
    """

    base_move_cost: int = doubloons(1)
    interest_rate: float = 2.0
    central_income: int = doubloons(2)
    peripheral_income: int = doubloons(1)
    pawn_price: int = doubloons(2)
    knight_price: int = doubloons(6)
    bishop_price: int = doubloons(6.3)
    rook_price: int = doubloons(10)
    queen_price: int = doubloons(18)
    king_price: int = doubloons(200)
    control: SectorControlPolicy = field(default_factory=PieceCountControl)

    @classmethod
    def default(cls) -> Market:
        return cls()

    # ── Configuration helpers ────────────────────────────────────────────

    def with_move_pricing(self, base_move_cost: int, interest_rate: float) -> Market:
        return replace(self, base_move_cost=base_move_cost, interest_rate=interest_rate)

    def with_income(self, central: int, peripheral: int) -> Market:
        return replace(self, central_income=central, peripheral_income=peripheral)

    def with_piece_price(self, piece_type: PieceType, price: int) -> Market:
        if price < 0:
            raise ValueError(f"Price must be non-negative: {price}")
        return replace(self, **{_PRICE_FIELDS[piece_type]: price})

    def with_control(self, control: SectorControlPolicy) -> Market:
        return replace(self, control=control)

    # ── Prices ───────────────────────────────────────────────────────────

    def move_price(self, moves_made: int) -> int:
        """Base fee for the action following *moves_made* paid actions."""
        if moves_made < 0:
            raise ValueError(f"moves_made must be non-negative: {moves_made}")
        return int(self.base_move_cost * self.interest_rate**moves_made)

    def purchase_price(self, piece_type: PieceType) -> int:
        return getattr(self, _PRICE_FIELDS[piece_type])

    def action_price(self, action: Action, moves_made: int) -> int:
        """Total cost of *action*: the move fee plus any purchase price."""
        price = self.move_price(moves_made)
        if isinstance(action, Purchase):
            price += self.purchase_price(action.piece_type)
        return price

    # ── Territory ────────────────────────────────────────────────────────

    def sector_control(self, board: Board, sector: Sector) -> Color | None:
        owner = self.control.controller(board, sector)
        _LOGGER.debug("Sector %s controlled by %s", sector, owner)
        return owner

    def controlled_sectors(self, board: Board, color: Color) -> list[Sector]:
        return [
            sector
            for sector in Sector.all()
            if self.control.controller(board, sector) == color
        ]

    def sector_income(self, sector: Sector) -> int:
        return self.central_income if sector.is_central else self.peripheral_income

    def territory_income(self, board: Board, color: Color) -> int:
        """Income *color* earns per turn from the sectors it controls."""
        return sum(
            self.sector_income(sector)
            for sector in self.controlled_sectors(board, color)
        )

    # ── Ledger operations ────────────────────────────────────────────────

    def authorize_and_charge(self, bank: Bank, amount: int) -> None:
        """Debit *amount* or raise :class:`InsufficientFunds` leaving *bank* as is."""
        bank.withdraw(amount)

    def settle_end_of_turn(self, bank: Bank, board: Board, color: Color) -> int:
        """Credit *color*'s territory income to its bank and return it."""
        if bank.color != color:
            raise ValueError(f"Bank of {bank.color} cannot settle for {color}")
        income = self.territory_income(board, color)
        bank.deposit(income)
        _LOGGER.info(
            "%s earned %s, balance %s",
            color,
            format_currency(income),
            format_currency(bank.balance),
        )
        return income


_PRICE_FIELDS: dict[PieceType, str] = {
    PieceType.PAWN: "pawn_price",
    PieceType.KNIGHT: "knight_price",
    PieceType.BISHOP: "bishop_price",
    PieceType.ROOK: "rook_price",
    PieceType.QUEEN: "queen_price",
    PieceType.KING: "king_price",
}

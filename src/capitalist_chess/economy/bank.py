"""Per-color ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from capitalist_chess.core.enums import Color
from capitalist_chess.core.errors import InsufficientFunds
from capitalist_chess.economy.currency import format_currency

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class Bank:
    """Balance of one color plus the number of actions paid for this turn.

    A bank belongs to exactly one color and is only changed through the
    market and the turn engine.  The balance never goes below zero.
    """

    color: Color
    balance: int = 0
    moves_made_this_turn: int = 0

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise ValueError(f"Balance cannot be negative: {self.balance}")

    def can_afford(self, amount: int) -> bool:
        return self.balance >= amount

    def deposit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Deposit must be non-negative: {amount}")
        self.balance += amount

    def withdraw(self, amount: int) -> None:
        """Debit *amount*, or raise :class:`InsufficientFunds` untouched."""
        if amount < 0:
            raise ValueError(f"Withdrawal must be non-negative: {amount}")
        if self.balance < amount:
            raise InsufficientFunds(amount, self.balance)
        self.balance -= amount
        _LOGGER.debug(
            "%s paid %s, balance %s",
            self.color,
            format_currency(amount),
            format_currency(self.balance),
        )

    def record_action(self) -> None:
        self.moves_made_this_turn += 1

    def reset_turn(self) -> None:
        self.moves_made_this_turn = 0

    def copy(self) -> Bank:
        return Bank(self.color, self.balance, self.moves_made_this_turn)

    def __str__(self) -> str:
        return f"{self.color}: {format_currency(self.balance)}"

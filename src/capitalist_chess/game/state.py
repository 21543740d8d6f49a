"""Turn engine: game state, priced actions and end-of-turn settlement."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from capitalist_chess.core.enums import Color
from capitalist_chess.core.errors import GameAlreadyOver, IllegalMove, PurchaseWhileInCheck
from capitalist_chess.core.move import Action, Purchase, Relocate, Turn
from capitalist_chess.core.move_generator import MoveGenerator
from capitalist_chess.core.notation import STARTING_FEN, position_from_fen
from capitalist_chess.core.position import Position
from capitalist_chess.economy.bank import Bank
from capitalist_chess.economy.currency import format_currency
from capitalist_chess.economy.market import Market
from capitalist_chess.game.outcome import Outcome, TurnPhase, TurnRecord
from capitalist_chess.game.rules import Rules

_LOGGER = logging.getLogger(__name__)

DEFAULT_BALANCE = 100


class GameState:
    """Board, both banks and the turn in progress.

    The state only changes through :meth:`apply` and :meth:`end_turn`.  Every
    action is validated before anything is touched, so a rejected action
    leaves the state exactly as it was.

    Quick start::

        state = GameState()
        state.apply(Relocate(E2, E4))  # pays 10¢
        state.end_turn()               # income settles
    """

    __slots__ = (
        "_position",
        "_banks",
        "_market",
        "_result",
        "_phase",
        "_current",
        "_spent",
        "_history",
    )

    def __init__(
        self,
        market: Market | None = None,
        white_balance: int = DEFAULT_BALANCE,
        black_balance: int = DEFAULT_BALANCE,
        fen: str | None = None,
    ) -> None:
        self._position = position_from_fen(fen or STARTING_FEN)
        self._banks = (
            Bank(Color.WHITE, white_balance),
            Bank(Color.BLACK, black_balance),
        )
        self._market = market if market is not None else Market.default()
        self._result: Outcome | None = None
        self._phase = TurnPhase.AWAITING_MOVES
        self._current: list[Action] = []
        self._spent = 0
        self._history: list[TurnRecord] = []
        self._check_termination()

    # ── Read-only accessors ──────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._position

    @property
    def result(self) -> Outcome | None:
        return self._result

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    @property
    def is_game_over(self) -> bool:
        return self._result is not None

    @property
    def current_turn(self) -> Turn:
        """Actions taken so far in the turn in progress."""
        return tuple(self._current)

    @property
    def turn_history(self) -> tuple[TurnRecord, ...]:
        return tuple(self._history)

    def whose_turn(self) -> Color:
        return self._position.side_to_move

    def get_bank(self, color: Color) -> Bank:
        """Snapshot of *color*'s bank; mutating it does not affect the game."""
        return self._banks[color].copy()

    def get_market(self) -> Market:
        return self._market

    # ── Legality and prices ──────────────────────────────────────────────

    def legal_moves(self) -> list[Action]:
        """Every rule-legal action for the side to move, ignoring price.

        Relocations come first in generator order, then purchases by square
        and piece type.  Purchases are absent while the mover is in check.
        """
        gen = MoveGenerator(self._position)
        actions: list[Action] = list(gen.generate_legal_moves())
        actions.extend(gen.generate_purchases())
        return actions

    def is_legal_move(self, action: Action) -> bool:
        """Whether *action* is rule-legal now; a relocation is matched by its
        squares and promotion piece.
        """
        _check_action(action)
        if isinstance(action, Relocate):
            resolved = self._position.resolve_relocation(action)
            return resolved is not None and resolved in self.legal_moves()
        return action in self.legal_moves()

    def next_move_price(self) -> int:
        """Fee for the next action of the turn, before any purchase price."""
        bank = self._banks[self.whose_turn()]
        return self._market.move_price(bank.moves_made_this_turn)

    def next_action_price(self, action: Action) -> int:
        bank = self._banks[self.whose_turn()]
        return self._market.action_price(action, bank.moves_made_this_turn)

    def affordable_moves(self) -> list[Action]:
        """:meth:`legal_moves` the mover can currently pay for."""
        balance = self._banks[self.whose_turn()].balance
        if balance < self.next_move_price():
            return []
        return [a for a in self.legal_moves() if self.next_action_price(a) <= balance]

    def has_affordable_action(self) -> bool:
        return not Rules.is_bankrupt(self)

    # ── Mutation ─────────────────────────────────────────────────────────

    def apply(self, action_or_turn: Action | Sequence[Action]) -> None:
        """Apply one action, or a whole turn atomically.

        A single action ends the turn automatically once nothing further is
        affordable.  A turn is validated on a copy first and always ends
        the turn when committed.
        """
        if isinstance(action_or_turn, (Relocate, Purchase)):
            self.apply_action(action_or_turn)
        elif isinstance(action_or_turn, Sequence) and not isinstance(action_or_turn, str):
            self.apply_turn(action_or_turn)
        else:
            raise TypeError(
                f"Expected an action or a sequence of actions, got {type(action_or_turn).__name__}"
            )

    def apply_action(self, action: Action) -> None:
        self._apply_action(action)
        if not self.has_affordable_action():
            _LOGGER.debug("%s has nothing affordable left; turn ends", self.whose_turn())
            self._finish_turn()

    def apply_turn(self, turn: Sequence[Action]) -> None:
        self._ensure_running()
        if not turn:
            raise IllegalMove("A turn needs at least one action")
        scratch = self.copy()
        for action in turn:
            scratch._apply_action(action)
        scratch._finish_turn()
        self._adopt(scratch)

    def end_turn(self) -> None:
        """End the turn voluntarily; at least one action must have been taken."""
        self._ensure_running()
        if not self._current:
            raise IllegalMove("Cannot end a turn without taking an action")
        self._finish_turn()

    def push_action(self, action: Action) -> None:
        """Charge for and play an action taken from :meth:`legal_moves`.

        Board legality is not re-checked; price is.  Meant for the search,
        which only ever plays generated actions on its own copies.
        """
        self._ensure_running()
        price = self.next_action_price(action)
        bank = self._banks[self.whose_turn()]
        self._market.authorize_and_charge(bank, price)
        if isinstance(action, Purchase):
            self._position.apply_purchase(action.piece_type, bank.color, action.to_sq)
        else:
            self._position.make_move(action)
        self._record(bank, action, price)

    def finish_turn(self) -> None:
        """End the turn without the voluntary-end precondition check."""
        self._ensure_running()
        self._finish_turn()

    def copy(self) -> GameState:
        """Independent copy sharing only the immutable market."""
        clone = GameState.__new__(GameState)
        clone._position = self._position.copy()
        clone._banks = (self._banks[0].copy(), self._banks[1].copy())
        clone._market = self._market
        clone._result = self._result
        clone._phase = self._phase
        clone._current = list(self._current)
        clone._spent = self._spent
        clone._history = list(self._history)
        return clone

    # ── Internal ─────────────────────────────────────────────────────────

    def _ensure_running(self) -> None:
        if self._result is not None:
            raise GameAlreadyOver(f"Game is over: {self._result}")

    def _apply_action(self, action: Action) -> None:
        self._ensure_running()
        _check_action(action)
        color = self.whose_turn()
        bank = self._banks[color]

        scratch = self._position.copy()
        if isinstance(action, Purchase):
            if MoveGenerator(scratch).is_in_check(color):
                raise PurchaseWhileInCheck(f"{color} cannot buy while in check")
            scratch.apply_purchase(action.piece_type, color, action.to_sq)
        else:
            action = scratch.apply_relocation(action)

        price = self._market.action_price(action, bank.moves_made_this_turn)
        self._market.authorize_and_charge(bank, price)
        self._position = scratch
        self._record(bank, action, price)

    def _record(self, bank: Bank, action: Action, price: int) -> None:
        bank.record_action()
        self._current.append(action)
        self._spent += price
        _LOGGER.debug("%s played %s for %s", bank.color, action, format_currency(price))

    def _finish_turn(self) -> None:
        color = self.whose_turn()
        bank = self._banks[color]
        income = self._market.settle_end_of_turn(bank, self._position.board, color)
        self._phase = TurnPhase.TURN_SETTLED
        self._history.append(TurnRecord(color, tuple(self._current), self._spent, income))
        bank.reset_turn()
        self._current.clear()
        self._spent = 0
        self._position.pass_turn()
        self._phase = TurnPhase.AWAITING_MOVES
        self._check_termination()

    def _check_termination(self) -> None:
        outcome = Rules.outcome(self)
        if outcome is not None:
            self._result = outcome
            self._phase = TurnPhase.GAME_OVER
            _LOGGER.info("Game over: %s", outcome)

    def _adopt(self, other: GameState) -> None:
        self._position = other._position
        self._banks = other._banks
        self._result = other._result
        self._phase = other._phase
        self._current = other._current
        self._spent = other._spent
        self._history = other._history

    def __repr__(self) -> str:
        white, black = self._banks
        return (
            f"GameState(to_move={self.whose_turn()}, white={white.balance}, "
            f"black={black.balance}, result={self._result})"
        )


def _check_action(action: object) -> None:
    if not isinstance(action, (Relocate, Purchase)):
        raise TypeError(f"Not an action: {action!r}")

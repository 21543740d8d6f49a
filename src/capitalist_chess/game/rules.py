"""Termination rules: checkmate, no pieces, bankruptcy."""

from __future__ import annotations

from typing import TYPE_CHECKING

from capitalist_chess.core.enums import WinReason
from capitalist_chess.core.move_generator import MoveGenerator
from capitalist_chess.game.outcome import Outcome

if TYPE_CHECKING:
    from capitalist_chess.game.state import GameState


class Rules:
    """Static rule-checker that operates on a :class:`GameState`.

    Every predicate looks at the side to move at the start of its turn.
    There are no draws: a side that can still pay for a legal action is
    never forced to stop.
    """

    @staticmethod
    def is_in_check(state: GameState) -> bool:
        position = state.position
        return MoveGenerator(position).is_in_check(position.side_to_move)

    @staticmethod
    def can_afford_relocation(state: GameState) -> bool:
        """Whether the mover can pay for at least one legal relocation."""
        if state.get_bank(state.whose_turn()).balance < state.next_move_price():
            return False
        return bool(MoveGenerator(state.position).generate_legal_moves())

    @staticmethod
    def is_checkmate(state: GameState) -> bool:
        return Rules.is_in_check(state) and not Rules.can_afford_relocation(state)

    @staticmethod
    def has_no_pieces(state: GameState) -> bool:
        position = state.position
        return position.board.piece_count(position.side_to_move) == 0

    @staticmethod
    def is_bankrupt(state: GameState) -> bool:
        """No legal action of any kind is affordable."""
        if Rules.can_afford_relocation(state):
            return False
        balance = state.get_bank(state.whose_turn()).balance
        gen = MoveGenerator(state.position)
        return all(
            state.next_action_price(purchase) > balance
            for purchase in gen.generate_purchases()
        )

    @staticmethod
    def outcome(state: GameState) -> Outcome | None:
        """Result for the side about to move, or ``None`` while play goes on."""
        loser = state.whose_turn()
        if Rules.is_checkmate(state):
            return Outcome(loser.opposite, WinReason.CHECKMATE)
        if Rules.has_no_pieces(state):
            return Outcome(loser.opposite, WinReason.NO_PIECES)
        if Rules.is_bankrupt(state):
            return Outcome(loser.opposite, WinReason.BANKRUPT)
        return None

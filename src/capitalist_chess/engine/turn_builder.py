"""Candidate turn construction.

The adversarial search treats whole turns as edges.  The builder runs a
small local search inside one turn: it ranks affordable actions with the
greedy-capitalist heuristic and extends the best few into multi-action
sequences.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from capitalist_chess.core.enums import MoveFlag, PieceType
from capitalist_chess.core.move import Action, Purchase, Relocate, Turn
from capitalist_chess.core.piece import Piece
from capitalist_chess.core.types import file_of, make_square, rank_of
from capitalist_chess.engine.search import SearchLimits

if TYPE_CHECKING:
    from capitalist_chess.game.state import GameState


@dataclass(slots=True, frozen=True)
class TurnBuilder:
    """Builds ranked candidate turns for the side to move."""

    limits: SearchLimits = SearchLimits()

    def candidate_turns(self, state: GameState) -> list[Turn]:
        """Best candidate turns, highest greedy score first.

        Every non-empty prefix of an expanded sequence is itself a
        candidate.  Ties keep generation order.
        """
        scored: list[tuple[int, Turn]] = []
        self._expand(state, (), 0, scored)
        scored.sort(key=lambda item: -item[0])
        return [turn for _, turn in scored[: self.limits.max_candidate_turns]]

    def ranked_actions(self, state: GameState) -> list[tuple[int, Action]]:
        """Affordable actions with their greedy gain, best first."""
        ranked = [(self.action_gain(state, a), a) for a in state.affordable_moves()]
        ranked.sort(key=lambda item: -item[0])
        return ranked

    def action_gain(self, state: GameState, action: Action) -> int:
        """Material won or bought plus income change, minus the price paid."""
        position = state.position
        board = position.board
        color = state.whose_turn()
        market = state.get_market()

        gain = -state.next_action_price(action)
        income_before = market.territory_income(board, color)

        scratch = position.copy()
        if isinstance(action, Purchase):
            gain += market.purchase_price(action.piece_type)
            scratch.place_piece(Piece(color, action.piece_type), action.to_sq)
        else:
            gain += self._capture_value(state, action)
            if action.is_promotion:
                gain += market.purchase_price(action.promotion) - market.purchase_price(
                    PieceType.PAWN
                )
            scratch.make_move(action)

        gain += market.territory_income(scratch.board, color) - income_before
        return gain

    # ── Internal ─────────────────────────────────────────────────────────

    def _expand(
        self,
        state: GameState,
        prefix: Turn,
        score: int,
        out: list[tuple[int, Turn]],
    ) -> None:
        ranked = self.ranked_actions(state)
        for gain, action in ranked[: self.limits.action_branching]:
            turn = prefix + (action,)
            total = score + gain
            out.append((total, turn))
            if len(turn) < self.limits.max_turn_actions:
                child = state.copy()
                child.push_action(action)
                self._expand(child, turn, total, out)

    @staticmethod
    def _capture_value(state: GameState, move: Relocate) -> int:
        board = state.position.board
        if move.flag == MoveFlag.EN_PASSANT:
            victim = board[make_square(file_of(move.to_sq), rank_of(move.from_sq))]
        else:
            victim = board[move.to_sq]
        if victim is None:
            return 0
        return state.get_market().purchase_price(victim.piece_type)

"""Static evaluation of a game state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from capitalist_chess.core.enums import Color, PieceType
from capitalist_chess.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from capitalist_chess.game.state import GameState

WIN_SCORE = 1_000_000


@dataclass(slots=True, frozen=True)
class EvalWeights:
    """Integer weights of the evaluation terms.

    ``income_horizon`` is how many turns of territory income count towards
    the score; it stands in for the ongoing value of holding sectors.
    """

    material: int = 1
    income_horizon: int = 3
    balance: int = 1
    mobility: int = 1


@dataclass(slots=True, frozen=True)
class Evaluator:
    """Weighted material, income, cash and mobility from the mover's view."""

    weights: EvalWeights = field(default_factory=EvalWeights)

    def evaluate(self, state: GameState, ply: int = 0) -> int:
        """Score for the side to move in *state*.

        Finished games score ``±WIN_SCORE`` pulled towards zero by *ply*, so
        faster wins and slower losses are preferred.
        """
        me = state.whose_turn()
        if state.result is not None:
            if state.result.winner == me:
                return WIN_SCORE - ply
            return -WIN_SCORE + ply
        return self.side_value(state, me) - self.side_value(state, me.opposite)

    def side_value(self, state: GameState, color: Color) -> int:
        w = self.weights
        board = state.position.board
        market = state.get_market()

        material = sum(
            market.purchase_price(piece_type) * len(board.pieces(color, piece_type))
            for piece_type in PieceType
        )
        income = market.territory_income(board, color)
        balance = state.get_bank(color).balance
        mobility = len(
            MoveGenerator(state.position).generate_pseudo_legal_moves(color)
        )
        return (
            w.material * material
            + w.income_horizon * income
            + w.balance * balance
            + w.mobility * mobility
        )

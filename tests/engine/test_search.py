"""Tests for the turn-level minimax engine."""

import pytest

from capitalist_chess.core.enums import Color, WinReason
from capitalist_chess.core.errors import NoLegalTurns
from capitalist_chess.core.move import Relocate, Turn
from capitalist_chess.core.types import A1, A8, B1, B8
from capitalist_chess.engine import MinimaxEngine, SearchLimits, best_move
from capitalist_chess.engine.evaluation import WIN_SCORE, Evaluator
from capitalist_chess.engine.minimax import play_turn
from capitalist_chess.engine.turn_builder import TurnBuilder
from capitalist_chess.game.state import GameState

FREE_QUEEN = "q6k/8/8/8/8/8/8/R3K3 w - - 0 1"
MATE_IN_ONE = "7k/8/6K1/8/8/8/8/1Q6 w - - 0 1"
SMALL = SearchLimits(max_depth=3, max_turn_actions=2, action_branching=3, max_candidate_turns=4)


def plain_minimax(
    state: GameState,
    depth: int,
    builder: TurnBuilder,
    evaluator: Evaluator,
    ply: int,
) -> int:
    if depth == 0 or state.is_game_over:
        return evaluator.evaluate(state, ply)
    return max(
        -plain_minimax(play_turn(state, turn), depth - 1, builder, evaluator, ply + 1)
        for turn in builder.candidate_turns(state)
    )


def plain_root(state: GameState, limits: SearchLimits) -> tuple[int, Turn]:
    builder = TurnBuilder(limits)
    evaluator = Evaluator()
    best: tuple[int, Turn] | None = None
    for turn in builder.candidate_turns(state):
        score = -plain_minimax(
            play_turn(state, turn), limits.max_depth - 1, builder, evaluator, 1
        )
        if best is None or score > best[0]:
            best = (score, turn)
    assert best is not None
    return best


class _FlatEvaluator(Evaluator):
    def evaluate(self, state: GameState, ply: int = 0) -> int:
        return 0


class _CountingEngine(MinimaxEngine):
    def __init__(self) -> None:
        super().__init__()
        self.negamax_calls = 0

    def _negamax(self, state, depth, alpha, beta, ply, builder):
        self.negamax_calls += 1
        return super()._negamax(state, depth, alpha, beta, ply, builder)


class TestMinimaxEngine:
    def test_takes_free_queen_at_depth_4(self) -> None:
        state = GameState(fen=FREE_QUEEN, white_balance=10, black_balance=10)
        turn = best_move(state)
        assert Relocate(A1, A8) in turn

    def test_finds_mate_in_one(self) -> None:
        state = GameState(fen=MATE_IN_ONE, white_balance=10)
        limits = SearchLimits(
            max_depth=1, max_turn_actions=1, action_branching=40, max_candidate_turns=40
        )
        result = MinimaxEngine().search(state, limits)
        assert result.best_turn == (Relocate(B1, B8),)
        assert result.score == WIN_SCORE - 1
        after = play_turn(state, result.best_turn)
        assert after.result is not None
        assert after.result.winner == Color.WHITE
        assert after.result.reason == WinReason.CHECKMATE

    def test_matches_plain_minimax(self) -> None:
        state = GameState(fen=FREE_QUEEN, white_balance=40, black_balance=40)
        result = MinimaxEngine().search(state, SMALL)
        score, turn = plain_root(state, SMALL)
        assert result.best_turn == turn
        assert result.score == score
        assert result.depth == SMALL.max_depth

    def test_ties_go_to_first_generated_turn(self) -> None:
        state = GameState(white_balance=200)
        engine = MinimaxEngine(_FlatEvaluator())
        result = engine.search(state, SMALL)
        assert result.best_turn == TurnBuilder(SMALL).candidate_turns(state)[0]

    def test_deterministic(self) -> None:
        state = GameState(white_balance=200, black_balance=200)
        first = MinimaxEngine().search(state, SMALL)
        second = MinimaxEngine().search(state, SMALL)
        assert first == second

    def test_search_does_not_touch_state(self) -> None:
        state = GameState(white_balance=200)
        MinimaxEngine().search(state, SMALL)
        assert state.current_turn == ()
        assert state.turn_history == ()
        assert state.get_bank(state.whose_turn()).balance == 200

    def test_counts_nodes(self) -> None:
        engine = _CountingEngine()
        result = engine.search(GameState(), SMALL)
        assert engine.negamax_calls == result.nodes > 0


class TestCancellation:
    def test_cancel_before_first_depth(self) -> None:
        state = GameState()
        result = MinimaxEngine().search(state, SMALL, is_cancelled=lambda: True)
        assert result.depth == 0
        assert result.best_turn == TurnBuilder(SMALL).candidate_turns(state)[0]

    def test_cancel_keeps_last_completed_depth(self) -> None:
        state = GameState()
        engine = _CountingEngine()
        stop_after = 3

        def is_cancelled() -> bool:
            return engine.negamax_calls > stop_after

        result = engine.search(state, SMALL, is_cancelled=is_cancelled)
        assert result.depth < SMALL.max_depth
        assert result.best_turn is not None


class TestBestMove:
    def test_no_legal_turns_when_game_over(self) -> None:
        state = GameState(fen="4k3/8/8/8/8/8/8/4K3 w - - 0 1", white_balance=0)
        with pytest.raises(NoLegalTurns):
            best_move(state)

    def test_returns_affordable_turn(self) -> None:
        state = GameState(white_balance=30)
        limits = SearchLimits(max_depth=2)
        turn = MinimaxEngine().best_move(state, limits)
        clone = state.copy()
        clone.apply(turn)
        assert clone.get_bank(state.whose_turn()).balance >= 0

    def test_invalid_limits(self) -> None:
        with pytest.raises(ValueError):
            SearchLimits(max_depth=0)
        with pytest.raises(ValueError):
            MinimaxEngine(workers=0)


@pytest.mark.slow
class TestParallelSearch:
    def test_process_pool_matches_sequential(self) -> None:
        state = GameState(fen=FREE_QUEEN, white_balance=40, black_balance=40)
        sequential = MinimaxEngine().search(state, SMALL)
        parallel = MinimaxEngine(workers=2).search(state, SMALL)
        assert parallel.best_turn == sequential.best_turn
        assert parallel.score == sequential.score
        assert parallel.depth == sequential.depth

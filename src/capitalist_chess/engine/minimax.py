"""Turn-level negamax search with alpha-beta pruning."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ProcessPoolExecutor

from capitalist_chess.core.errors import NoLegalTurns
from capitalist_chess.core.move import Turn
from capitalist_chess.engine.evaluation import WIN_SCORE, Evaluator
from capitalist_chess.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult
from capitalist_chess.engine.turn_builder import TurnBuilder
from capitalist_chess.game.state import GameState

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 10 * WIN_SCORE


def _never_cancelled() -> bool:
    return False


def play_turn(state: GameState, turn: Turn) -> GameState:
    """Copy of *state* after *turn* has been paid for and settled."""
    child = state.copy()
    for action in turn:
        child.push_action(action)
    child.finish_turn()
    return child


class MinimaxEngine(IEngine):
    """Fixed-depth adversarial search where each ply is one full turn.

    Candidate turns come from :class:`TurnBuilder` and keep their generated
    order at every depth, and only a strictly better score replaces the
    best turn.  Ties therefore go to the first generated turn, and the
    chosen turn is the one plain minimax would pick.

    With ``workers > 1`` the root turns are scored in a process pool with a
    full window each; the choice and score are the same as sequential.
    """

    __slots__ = ("_evaluator", "_workers", "_nodes", "_cancel_check")

    def __init__(self, evaluator: Evaluator | None = None, *, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self._evaluator = evaluator if evaluator is not None else Evaluator()
        self._workers = workers
        self._nodes = 0
        self._cancel_check: CancelCheck = _never_cancelled

    @property
    def workers(self) -> int:
        return self._workers

    def best_move(self, state: GameState, limits: SearchLimits | None = None) -> Turn:
        """Best turn for the side to move.

        Raises :class:`NoLegalTurns` when nothing affordable is available,
        including when the game is already over.
        """
        if state.is_game_over or not state.affordable_moves():
            raise NoLegalTurns(f"{state.whose_turn()} has no affordable legal action")
        result = self.search(state, limits or SearchLimits())
        assert result.best_turn is not None
        return result.best_turn

    def search(
        self,
        state: GameState,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        self._nodes = 0
        self._cancel_check = is_cancelled or _never_cancelled
        builder = TurnBuilder(limits)

        if state.is_game_over:
            return SearchResult(None, self._evaluator.evaluate(state), 0, 0)
        root_turns = builder.candidate_turns(state)
        if not root_turns:
            return SearchResult(None, -WIN_SCORE, 0, 0)

        best_turn = root_turns[0]
        best_score = -self._evaluator.evaluate(play_turn(state, best_turn), 1)
        completed_depth = 0

        for depth in range(1, limits.max_depth + 1):
            if self._cancel_check():
                break
            if self._workers > 1:
                scored = self._search_root_parallel(state, root_turns, depth, builder)
            else:
                scored = self._search_root(state, root_turns, depth, builder)
            if scored is None:
                break
            best_score, best_turn = scored
            completed_depth = depth
            _LOGGER.debug("Depth %d: %s (%d)", depth, best_turn, best_score)

        _LOGGER.info(
            "Search chose %s at depth %d, score %d, %d nodes",
            " ".join(str(a) for a in best_turn),
            completed_depth,
            best_score,
            self._nodes,
        )
        return SearchResult(best_turn, best_score, completed_depth, self._nodes)

    # ── Root ─────────────────────────────────────────────────────────────

    def _search_root(
        self,
        state: GameState,
        root_turns: list[Turn],
        depth: int,
        builder: TurnBuilder,
    ) -> tuple[int, Turn] | None:
        """Best (score, turn) at *depth*, or ``None`` if cancelled midway."""
        best_score = -_INF_SCORE
        best_turn: Turn | None = None
        alpha = -_INF_SCORE

        for turn in root_turns:
            if self._cancel_check():
                return None
            child = play_turn(state, turn)
            score = -self._negamax(child, depth - 1, -_INF_SCORE, -alpha, 1, builder)
            if self._cancel_check():
                return None
            if score > best_score:
                best_score = score
                best_turn = turn
            if score > alpha:
                alpha = score

        assert best_turn is not None
        return best_score, best_turn

    def _search_root_parallel(
        self,
        state: GameState,
        root_turns: list[Turn],
        depth: int,
        builder: TurnBuilder,
    ) -> tuple[int, Turn] | None:
        with ProcessPoolExecutor(max_workers=self._workers) as pool:
            futures: list[Future[tuple[int, int]]] = [
                pool.submit(
                    _score_root_turn,
                    state,
                    turn,
                    depth,
                    builder,
                    self._evaluator,
                )
                for turn in root_turns
            ]
            scores: list[int] = []
            for future in futures:
                if self._cancel_check():
                    for pending in futures:
                        pending.cancel()
                    return None
                score, nodes = future.result()
                scores.append(score)
                self._nodes += nodes

        best_index = 0
        for index, score in enumerate(scores):
            if score > scores[best_index]:
                best_index = index
        return scores[best_index], root_turns[best_index]

    # ── Tree ─────────────────────────────────────────────────────────────

    def _negamax(
        self,
        state: GameState,
        depth: int,
        alpha: int,
        beta: int,
        ply: int,
        builder: TurnBuilder,
    ) -> int:
        self._nodes += 1
        if depth <= 0 or state.is_game_over or self._cancel_check():
            return self._evaluator.evaluate(state, ply)

        turns = builder.candidate_turns(state)
        if not turns:
            return self._evaluator.evaluate(state, ply)

        best_score = -_INF_SCORE
        for turn in turns:
            child = play_turn(state, turn)
            score = -self._negamax(child, depth - 1, -beta, -alpha, ply + 1, builder)
            if score > best_score:
                best_score = score
            if score > alpha:
                alpha = score
            if alpha >= beta:
                break
        return best_score


def _score_root_turn(
    state: GameState,
    turn: Turn,
    depth: int,
    builder: TurnBuilder,
    evaluator: Evaluator,
) -> tuple[int, int]:
    """Process-pool entry point: exact score of one root turn and node count."""
    engine = MinimaxEngine(evaluator)
    child = play_turn(state, turn)
    score = -engine._negamax(child, depth - 1, -_INF_SCORE, _INF_SCORE, 1, builder)
    return score, engine._nodes


def best_move(
    state: GameState,
    limits: SearchLimits | None = None,
    *,
    workers: int = 1,
) -> Turn:
    """Convenience wrapper around :meth:`MinimaxEngine.best_move`."""
    return MinimaxEngine(workers=workers).best_move(state, limits)

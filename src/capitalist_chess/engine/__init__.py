"""Engine package: turn builder, evaluation, search and Qt worker bridge."""

from capitalist_chess.engine.evaluation import WIN_SCORE, EvalWeights, Evaluator
from capitalist_chess.engine.minimax import MinimaxEngine, best_move, play_turn
from capitalist_chess.engine.qt_bridge import EngineWorker
from capitalist_chess.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult
from capitalist_chess.engine.turn_builder import TurnBuilder

DefaultEngine: type[IEngine] = MinimaxEngine

__all__ = [
    "CancelCheck",
    "DefaultEngine",
    "EngineWorker",
    "EvalWeights",
    "Evaluator",
    "IEngine",
    "MinimaxEngine",
    "SearchLimits",
    "SearchResult",
    "TurnBuilder",
    "WIN_SCORE",
    "best_move",
    "play_turn",
]

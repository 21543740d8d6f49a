"""Qt bridge to run the turn search in a worker thread."""

from __future__ import annotations

import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from capitalist_chess.engine.minimax import MinimaxEngine
from capitalist_chess.engine.search import IEngine, SearchLimits
from capitalist_chess.game.state import GameState


DEFAULT_WORKER_DEPTH = 2


class EngineWorker(QObject):
    """Thread-affine worker that computes engine turns on demand.

    Move it to a ``QThread`` and connect :meth:`request_turn`; results come
    back through the signals tagged with the caller's request id.

    Pure-Python turn search grows fast with depth, so the worker defaults to
    two turns of lookahead instead of the library's four.  Deeper searches
    from a busy middlegame can run for minutes; hosts should call
    :meth:`cancel` when the player stops waiting, which ends the request with
    :attr:`search_cancelled`.
    """

    best_turn_ready = pyqtSignal(int, object, int, int, int)
    search_cancelled = pyqtSignal(int)
    search_no_turn = pyqtSignal(int, int, int, int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine", "_limits")

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_WORKER_DEPTH,
        max_turn_actions: int = 2,
        engine: IEngine | None = None,
    ) -> None:
        super().__init__()
        self._engine: IEngine = engine if engine is not None else MinimaxEngine()
        self._limits = SearchLimits(
            max_depth=max_depth, max_turn_actions=max_turn_actions
        )
        self._cancel_event = threading.Event()

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    @pyqtSlot(object, int)
    def request_turn(self, state_obj: object, request_id: int) -> None:
        """Search for the best turn in *state_obj* and emit the result."""
        if not isinstance(state_obj, GameState):
            self.search_error.emit(request_id, "Engine received invalid game state")
            return

        self._cancel_event.clear()
        try:
            result = self._engine.search(
                state_obj.copy(),
                self._limits,
                is_cancelled=self._cancel_event.is_set,
            )
        except Exception as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if result.best_turn is None:
            self.search_no_turn.emit(
                request_id,
                result.score,
                result.depth,
                result.nodes,
            )
            return

        self.best_turn_ready.emit(
            request_id,
            result.best_turn,
            result.score,
            result.depth,
            result.nodes,
        )

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current search."""
        self._cancel_event.set()

    @pyqtSlot(int, int)
    def set_limits(self, max_depth: int, max_turn_actions: int) -> None:
        """Update search limits (takes effect on the next search)."""
        self._limits = SearchLimits(
            max_depth=max_depth, max_turn_actions=max_turn_actions
        )

"""Game layer: turn engine, termination rules and rendering.

Quick start::

    from capitalist_chess.game import GameState, render_state

    state = GameState(white_balance=100, black_balance=100)
    print(render_state(state))
"""

from capitalist_chess.game.outcome import Outcome, TurnPhase, TurnRecord
from capitalist_chess.game.render import render_state
from capitalist_chess.game.rules import Rules
from capitalist_chess.game.state import DEFAULT_BALANCE, GameState

__all__ = [
    "DEFAULT_BALANCE",
    "GameState",
    "Outcome",
    "Rules",
    "TurnPhase",
    "TurnRecord",
    "render_state",
]

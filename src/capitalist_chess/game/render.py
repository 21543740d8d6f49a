"""Plain-text rendering of a game state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from capitalist_chess.core.enums import Color
from capitalist_chess.economy.currency import format_currency

if TYPE_CHECKING:
    from capitalist_chess.game.state import GameState


def render_state(state: GameState, *, unicode: bool = False) -> str:
    """Board diagram followed by both banks and the turn status.

    ::

        8 r n b q k b n r
        ...
          a b c d e f g h
        white: 90¢ (income 60¢)
        black: 100¢ (income 40¢)
        white to move, next action 20¢
    """
    board = state.position.board
    market = state.get_market()
    lines: list[str] = []
    for rank in range(7, -1, -1):
        cells: list[str] = []
        for file in range(8):
            piece = board[rank * 8 + file]
            if piece is None:
                cells.append(".")
            else:
                cells.append(piece.symbol if unicode else str(piece))
        lines.append(f"{rank + 1} {' '.join(cells)}")
    lines.append("  a b c d e f g h")

    for color in Color:
        bank = state.get_bank(color)
        income = market.territory_income(board, color)
        lines.append(
            f"{color}: {format_currency(bank.balance)} "
            f"(income {format_currency(income)})"
        )

    if state.result is not None:
        lines.append(f"game over: {state.result}")
    else:
        lines.append(
            f"{state.whose_turn()} to move, "
            f"next action {format_currency(state.next_move_price())}"
        )
    return "\n".join(lines)

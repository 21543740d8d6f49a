"""Tests for the turn engine."""

import pytest

from capitalist_chess.core.enums import Color, MoveFlag, PieceType
from capitalist_chess.core.errors import (
    EmptySquare,
    IllegalMove,
    InsufficientFunds,
    PurchaseWhileInCheck,
    SelfCheck,
)
from capitalist_chess.core.move import Purchase, Relocate
from capitalist_chess.core.piece import Piece
from capitalist_chess.core.types import A7, A8, B1, C3, D1, D2, D4, E1, E2, E3, E4, E5, E7, F1, F3, G1, H1
from capitalist_chess.game.outcome import TurnPhase
from capitalist_chess.game.state import GameState

BARE_KINGS = "4k3/8/8/8/8/8/8/4K3 w - - 0 1"
E2E4 = Relocate(E2, E4, MoveFlag.DOUBLE_PAWN)


class TestLegalMoves:
    def test_starting_position(self, new_game: GameState) -> None:
        actions = new_game.legal_moves()
        assert len(actions) == 20
        assert all(isinstance(a, Relocate) for a in actions)

    def test_purchases_follow_relocations(self) -> None:
        state = GameState(fen=BARE_KINGS)
        actions = state.legal_moves()
        assert len(actions) == 5 + 15 * 5
        first_purchase = next(i for i, a in enumerate(actions) if isinstance(a, Purchase))
        assert all(isinstance(a, Purchase) for a in actions[first_purchase:])

    def test_is_legal_move_ignores_price(self) -> None:
        state = GameState(fen=BARE_KINGS, white_balance=10)
        assert state.is_legal_move(Purchase(PieceType.QUEEN, D1))
        assert not state.is_legal_move(Purchase(PieceType.KING, H1))
        assert not state.is_legal_move(Relocate(E2, E4))

    def test_affordable_moves_filter_by_price(self) -> None:
        state = GameState(fen=BARE_KINGS, white_balance=70)
        affordable = state.affordable_moves()
        assert Purchase(PieceType.KNIGHT, D1) in affordable
        assert Purchase(PieceType.BISHOP, D1) not in affordable
        assert all(state.next_action_price(a) <= 70 for a in affordable)


class TestMovePricing:
    def test_prices_escalate_within_turn_and_reset(self) -> None:
        state = GameState(white_balance=1000)
        paid: list[int] = []
        for action in (
            E2E4,
            Relocate(D2, D4, MoveFlag.DOUBLE_PAWN),
            Relocate(G1, F3),
            Relocate(B1, C3),
        ):
            before = state.get_bank(Color.WHITE).balance
            state.apply(action)
            paid.append(before - state.get_bank(Color.WHITE).balance)
        assert paid == [10, 20, 40, 80]
        assert state.get_bank(Color.WHITE).moves_made_this_turn == 4

        state.end_turn()
        state.apply(Relocate(E7, E5, MoveFlag.DOUBLE_PAWN))
        state.end_turn()
        assert state.whose_turn() == Color.WHITE
        assert state.get_bank(Color.WHITE).moves_made_this_turn == 0
        assert state.next_move_price() == 10

    def test_purchase_costs_move_fee_plus_price(self) -> None:
        state = GameState(fen=BARE_KINGS, white_balance=100)
        state.apply(Purchase(PieceType.KNIGHT, D1))
        assert state.get_bank(Color.WHITE).balance == 30
        assert state.position.board[D1] == Piece(Color.WHITE, PieceType.KNIGHT)


class TestRejectedActions:
    def test_insufficient_funds_changes_nothing(self) -> None:
        state = GameState(fen=BARE_KINGS, white_balance=100)
        with pytest.raises(InsufficientFunds):
            state.apply(Purchase(PieceType.QUEEN, D1))
        assert state.get_bank(Color.WHITE).balance == 100
        assert state.position.board[D1] is None
        assert state.current_turn == ()
        # A cheaper alternative is still accepted in the same turn.
        state.apply(Purchase(PieceType.PAWN, D2))
        assert state.get_bank(Color.WHITE).balance == 70

    def test_purchase_refused_in_check_even_when_rich(self) -> None:
        state = GameState(fen="4k3/8/8/8/8/8/8/r3K3 w - - 0 1", white_balance=10_000)
        with pytest.raises(PurchaseWhileInCheck):
            state.apply(Purchase(PieceType.QUEEN, D2))
        assert state.get_bank(Color.WHITE).balance == 10_000
        assert not any(isinstance(a, Purchase) for a in state.legal_moves())

    def test_self_check_refused(self) -> None:
        state = GameState(fen="4r2k/8/8/8/8/8/4N3/4K3 w - - 0 1")
        with pytest.raises(SelfCheck):
            state.apply(Relocate(E2, C3))
        assert state.get_bank(Color.WHITE).balance == 100

    def test_moving_opponent_piece_refused(self, new_game: GameState) -> None:
        with pytest.raises(EmptySquare):
            new_game.apply(Relocate(E7, E5, MoveFlag.DOUBLE_PAWN))

    def test_end_turn_requires_an_action(self, new_game: GameState) -> None:
        with pytest.raises(IllegalMove, match="without taking an action"):
            new_game.end_turn()


class TestTurns:
    def test_apply_turn_commits_and_ends(self, new_game: GameState) -> None:
        new_game.apply((E2E4, Relocate(E4, E5)))
        assert new_game.whose_turn() == Color.BLACK
        record = new_game.turn_history[-1]
        assert record.color == Color.WHITE
        assert record.spent == 30
        assert record.income == 60
        assert new_game.get_bank(Color.WHITE).balance == 100 - 30 + 60

    def test_apply_turn_is_atomic(self, new_game: GameState) -> None:
        with pytest.raises(EmptySquare):
            new_game.apply((E2E4, Relocate(E2, E3)))
        assert new_game.position.board[E2] == Piece(Color.WHITE, PieceType.PAWN)
        assert new_game.get_bank(Color.WHITE).balance == 100
        assert new_game.whose_turn() == Color.WHITE
        assert new_game.turn_history == ()

    def test_apply_turn_atomic_on_funds(self) -> None:
        state = GameState(white_balance=25)
        with pytest.raises(InsufficientFunds):
            state.apply([E2E4, Relocate(D2, D4, MoveFlag.DOUBLE_PAWN)])
        assert state.get_bank(Color.WHITE).balance == 25
        assert state.position.board[E4] is None

    def test_empty_turn_refused(self, new_game: GameState) -> None:
        with pytest.raises(IllegalMove):
            new_game.apply(())

    def test_turn_ends_when_nothing_is_affordable(self) -> None:
        state = GameState(white_balance=10)
        state.apply(E2E4)
        assert state.whose_turn() == Color.BLACK
        assert state.phase == TurnPhase.AWAITING_MOVES
        assert state.get_bank(Color.WHITE).balance == 60

    def test_turn_stays_open_while_affordable(self, new_game: GameState) -> None:
        new_game.apply(E2E4)
        assert new_game.whose_turn() == Color.WHITE
        assert new_game.current_turn == (E2E4,)
        assert new_game.next_move_price() == 20


class TestIsolation:
    def test_get_bank_is_a_snapshot(self, new_game: GameState) -> None:
        bank = new_game.get_bank(Color.WHITE)
        bank.withdraw(100)
        assert new_game.get_bank(Color.WHITE).balance == 100

    def test_copy_is_independent(self, new_game: GameState) -> None:
        clone = new_game.copy()
        clone.apply(E2E4)
        assert new_game.position.board[E4] is None
        assert new_game.get_bank(Color.WHITE).balance == 100
        assert clone.get_bank(Color.WHITE).balance == 90

    def test_banks_belong_to_their_color(self, new_game: GameState) -> None:
        new_game.apply(E2E4)
        new_game.end_turn()
        assert new_game.get_bank(Color.BLACK).balance == 100



class TestPlainRelocations:
    """Relocations written as squares alone, as a host would submit them."""

    def test_double_step_without_flag(self, new_game: GameState) -> None:
        move = Relocate(E2, E4)
        assert new_game.is_legal_move(move)
        new_game.apply(move)
        assert new_game.position.en_passant == E3
        assert new_game.current_turn[0].flag == MoveFlag.DOUBLE_PAWN
        assert new_game.get_bank(Color.WHITE).balance == 90

    def test_castling_without_flag(self) -> None:
        state = GameState(fen="4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        move = Relocate(E1, G1)
        assert state.is_legal_move(move)
        state.apply(move)
        assert state.position.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert state.position.board[F1] == Piece(Color.WHITE, PieceType.ROOK)
        assert state.position.board[H1] is None

    def test_promotion_without_flag(self) -> None:
        state = GameState(fen="4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        move = Relocate(A7, A8, promotion=PieceType.ROOK)
        assert state.is_legal_move(move)
        state.apply(move)
        assert state.position.board[A8] == Piece(Color.WHITE, PieceType.ROOK)

    def test_promotion_defaults_to_queen(self) -> None:
        state = GameState(fen="4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        assert state.is_legal_move(Relocate(A7, A8))
        state.apply(Relocate(A7, A8))
        assert state.position.board[A8] == Piece(Color.WHITE, PieceType.QUEEN)

    def test_unreachable_square_still_illegal(self, new_game: GameState) -> None:
        move = Relocate(E2, E5)
        assert not new_game.is_legal_move(move)
        with pytest.raises(IllegalMove):
            new_game.apply(move)


class TestApplyInputTypes:
    def test_string_is_rejected(self, new_game: GameState) -> None:
        with pytest.raises(TypeError):
            new_game.apply("e2e4")  # type: ignore[arg-type]
        assert new_game.current_turn == ()
        assert new_game.get_bank(Color.WHITE).balance == 100

    def test_turn_with_foreign_item_is_rejected_atomically(self, new_game: GameState) -> None:
        with pytest.raises(TypeError):
            new_game.apply((Relocate(E2, E4), "e7e5"))  # type: ignore[arg-type]
        assert new_game.position.board[E2] is not None
        assert new_game.whose_turn() == Color.WHITE

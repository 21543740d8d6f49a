"""Tests for prices, territory income and charging."""

import dataclasses

import pytest

from capitalist_chess.core.enums import Color, MoveFlag, PieceType
from capitalist_chess.core.errors import InsufficientFunds
from capitalist_chess.core.move import Purchase, Relocate
from capitalist_chess.core.notation import STARTING_FEN, position_from_fen
from capitalist_chess.core.sector import Sector
from capitalist_chess.core.types import E2, E4, E1
from capitalist_chess.economy.bank import Bank
from capitalist_chess.economy.control import MaterialControl
from capitalist_chess.economy.market import Market

BARE_KINGS = "4k3/8/8/8/8/8/8/4K3 w - - 0 1"


class TestPrices:
    def test_move_price_escalates(self, market: Market) -> None:
        assert [market.move_price(n) for n in range(4)] == [10, 20, 40, 80]

    @pytest.mark.parametrize(
        ("piece_type", "price"),
        [
            (PieceType.PAWN, 20),
            (PieceType.KNIGHT, 60),
            (PieceType.BISHOP, 63),
            (PieceType.ROOK, 100),
            (PieceType.QUEEN, 180),
            (PieceType.KING, 2000),
        ],
    )
    def test_purchase_prices(self, market: Market, piece_type: PieceType, price: int) -> None:
        assert market.purchase_price(piece_type) == price

    def test_action_price(self, market: Market) -> None:
        move = Relocate(E2, E4, MoveFlag.DOUBLE_PAWN)
        buy = Purchase(PieceType.KNIGHT, E1)
        assert market.action_price(move, 0) == 10
        assert market.action_price(move, 2) == 40
        assert market.action_price(buy, 0) == 70
        assert market.action_price(buy, 1) == 80

    def test_negative_move_count_rejected(self, market: Market) -> None:
        with pytest.raises(ValueError):
            market.move_price(-1)


class TestConfiguration:
    def test_with_helpers_return_new_market(self, market: Market) -> None:
        cheap = market.with_move_pricing(5, 3.0).with_piece_price(PieceType.QUEEN, 90)
        assert [cheap.move_price(n) for n in range(3)] == [5, 15, 45]
        assert cheap.purchase_price(PieceType.QUEEN) == 90
        assert market.purchase_price(PieceType.QUEEN) == 180

    def test_market_is_frozen(self, market: Market) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            market.base_move_cost = 1  # type: ignore[misc]

    def test_default_equals_plain_construction(self) -> None:
        assert Market.default() == Market()


class TestTerritory:
    def test_initial_income_is_symmetric(self, market: Market) -> None:
        board = position_from_fen(STARTING_FEN).board
        white = market.territory_income(board, Color.WHITE)
        black = market.territory_income(board, Color.BLACK)
        assert white == black == 40
        assert market.controlled_sectors(board, Color.WHITE) == [Sector(i) for i in range(4)]

    def test_central_sector_adds_twenty(self, market: Market) -> None:
        before = position_from_fen(BARE_KINGS).board
        after = position_from_fen("4k3/8/8/8/3N4/8/8/4K3 w - - 0 1").board
        gain = market.territory_income(after, Color.WHITE) - market.territory_income(
            before, Color.WHITE
        )
        assert gain == 20
        assert market.sector_control(after, Sector(5)) == Color.WHITE

    def test_peripheral_sector_adds_ten(self, market: Market) -> None:
        before = position_from_fen(BARE_KINGS).board
        after = position_from_fen("4k3/8/8/N7/8/8/8/4K3 w - - 0 1").board
        gain = market.territory_income(after, Color.WHITE) - market.territory_income(
            before, Color.WHITE
        )
        assert gain == 10

    def test_policy_is_swappable(self, market: Market) -> None:
        board = position_from_fen("4k3/8/8/8/2pp4/2R5/8/4K3 w - - 0 1").board
        assert market.sector_control(board, Sector(5)) == Color.BLACK
        by_material = market.with_control(MaterialControl())
        assert by_material.sector_control(board, Sector(5)) == Color.WHITE
        assert by_material.territory_income(board, Color.WHITE) == 30


class TestCharging:
    def test_authorize_and_charge(self, market: Market) -> None:
        bank = Bank(Color.WHITE, 100)
        market.authorize_and_charge(bank, 70)
        assert bank.balance == 30

    def test_insufficient_funds_is_atomic(self, market: Market) -> None:
        bank = Bank(Color.WHITE, 60)
        with pytest.raises(InsufficientFunds):
            market.authorize_and_charge(bank, 70)
        assert bank.balance == 60

    def test_settle_end_of_turn(self, market: Market) -> None:
        board = position_from_fen(STARTING_FEN).board
        bank = Bank(Color.BLACK, 5)
        assert market.settle_end_of_turn(bank, board, Color.BLACK) == 40
        assert bank.balance == 45

    def test_settle_rejects_foreign_bank(self, market: Market) -> None:
        board = position_from_fen(STARTING_FEN).board
        with pytest.raises(ValueError):
            market.settle_end_of_turn(Bank(Color.WHITE, 0), board, Color.BLACK)

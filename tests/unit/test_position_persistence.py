# tests/unit/test_position_persistence.py
"""Unit tests for PositionRepository using MagicMock AsyncSession."""
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_positions.domain.models import MarketPosition, PositionKey
from src.pm_positions.infrastructure.persistence import PositionRepository, row_to_position

USER = "0x" + "a" * 40
MARKET = "0x" + "b" * 40


def _make_position_row(outcome_index: int = 0, **kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = f"{USER}{MARKET}{outcome_index}"
    row.user_address = USER
    row.market_address = MARKET
    row.outcome_index = outcome_index
    row.quantity_bought = kwargs.get("quantity_bought", Decimal("100"))
    row.quantity_sold = kwargs.get("quantity_sold", Decimal("40"))
    row.net_quantity = kwargs.get("net_quantity", Decimal("60"))
    row.value_bought = kwargs.get("value_bought", Decimal("55"))
    row.value_sold = kwargs.get("value_sold", Decimal("30"))
    row.net_value = kwargs.get("net_value", Decimal("25"))
    return row


@pytest.fixture
def db() -> MagicMock:
    return MagicMock()


def _returning(db: MagicMock, rows: list[MagicMock]) -> None:
    result_mock = MagicMock()
    result_mock.fetchall.return_value = rows
    db.execute = AsyncMock(return_value=result_mock)


class TestRowToPosition:
    def test_numeric_columns_become_ints(self) -> None:
        pos = row_to_position(_make_position_row(1))
        assert pos.outcome_index == 1
        assert pos.quantity_bought == 100
        assert isinstance(pos.quantity_bought, int)
        assert pos.net_value == 25
        assert pos.id == f"{USER}{MARKET}1"

    def test_amounts_beyond_64_bits_survive(self) -> None:
        big = 2**200 + 7
        pos = row_to_position(_make_position_row(quantity_bought=Decimal(big)))
        assert pos.quantity_bought == big


class TestGetMany:
    async def test_missing_keys_are_zero_filled_in_key_order(self, db: MagicMock) -> None:
        _returning(db, [_make_position_row(1)])
        keys = [PositionKey(USER, MARKET, i) for i in range(3)]

        positions = await PositionRepository().get_many(db, keys)

        assert [p.outcome_index for p in positions] == [0, 1, 2]
        assert positions[0] == MarketPosition(USER, MARKET, 0)
        assert positions[1].quantity_bought == 100
        assert positions[2].net_quantity == 0
        db.execute.assert_awaited_once()
        params = db.execute.call_args.args[1]
        assert params["ids"] == [k.position_id for k in keys]

    async def test_no_keys_skips_query(self, db: MagicMock) -> None:
        db.execute = AsyncMock()
        assert await PositionRepository().get_many(db, []) == []
        db.execute.assert_not_awaited()

    async def test_get_returns_zero_position_when_absent(self, db: MagicMock) -> None:
        _returning(db, [])
        pos = await PositionRepository().get(db, PositionKey(USER, MARKET, 4))
        assert pos.key == PositionKey(USER, MARKET, 4)
        assert pos.value_bought == 0


class TestSave:
    async def test_save_all_sends_one_batched_upsert(self, db: MagicMock) -> None:
        db.execute = AsyncMock()
        positions = [
            MarketPosition(USER, MARKET, 0, quantity_bought=5, net_quantity=5),
            MarketPosition(USER, MARKET, 1, quantity_sold=3, net_quantity=-3),
        ]

        await PositionRepository().save_all(db, positions)

        db.execute.assert_awaited_once()
        params = db.execute.call_args.args[1]
        assert isinstance(params, list)
        assert [p["id"] for p in params] == [p.id for p in positions]
        assert params[1]["net_quantity"] == -3
        assert params[0]["user_address"] == USER

    async def test_save_all_empty_is_noop(self, db: MagicMock) -> None:
        db.execute = AsyncMock()
        await PositionRepository().save_all(db, [])
        db.execute.assert_not_awaited()

    async def test_save_does_not_commit(self, db: MagicMock) -> None:
        db.execute = AsyncMock()
        db.commit = AsyncMock()
        await PositionRepository().save(db, MarketPosition(USER, MARKET, 2, value_sold=9))
        params = db.execute.call_args.args[1]
        assert params["id"] == f"{USER}{MARKET}2"
        assert params["value_sold"] == 9
        db.commit.assert_not_awaited()

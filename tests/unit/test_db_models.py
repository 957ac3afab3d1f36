"""ORM table definitions must line up with the raw SQL in the repositories."""

from src.pm_common.database import Base
from src.pm_positions.infrastructure.db_models import (
    ConditionORM,
    FixedProductMarketMakerORM,
    MarketPositionORM,
    TransactionORM,
)


def test_all_tables_registered() -> None:
    assert {
        MarketPositionORM.__tablename__,
        FixedProductMarketMakerORM.__tablename__,
        ConditionORM.__tablename__,
        TransactionORM.__tablename__,
    } <= set(Base.metadata.tables)


def test_market_position_columns() -> None:
    columns = set(Base.metadata.tables["market_positions"].columns.keys())
    assert {
        "id", "user_address", "market_address", "outcome_index",
        "quantity_bought", "quantity_sold", "net_quantity",
        "value_bought", "value_sold", "net_value", "updated_at",
    } <= columns


def test_amount_columns_hold_uint256() -> None:
    table = Base.metadata.tables["market_positions"]
    assert table.c.net_value.type.precision == 78
    assert table.c.net_value.type.scale == 0


def test_condition_payouts_nullable() -> None:
    table = Base.metadata.tables["conditions"]
    assert table.c.payout_numerators.nullable is True
    assert table.c.payout_denominator.nullable is True

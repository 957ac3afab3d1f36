"""SQLAlchemy ORM models for pm_positions.

These map to existing tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import ARRAY, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.pm_common.database import Base

# uint256 fits in 78 decimal digits
UINT256 = Numeric(78, 0)


class MarketPositionORM(Base):
    __tablename__ = "market_positions"

    id: Mapped[str] = mapped_column(String(150), primary_key=True)
    user_address: Mapped[str] = mapped_column(String(42), nullable=False)
    market_address: Mapped[str] = mapped_column(String(42), nullable=False)
    outcome_index: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_bought: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    quantity_sold: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    net_quantity: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    value_bought: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    value_sold: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    net_value: Mapped[Decimal] = mapped_column(UINT256, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class FixedProductMarketMakerORM(Base):
    __tablename__ = "fixed_product_market_makers"

    id: Mapped[str] = mapped_column(String(42), primary_key=True)
    outcome_slot_count: Mapped[int] = mapped_column(Integer, nullable=False)
    condition_ids: Mapped[list[str]] = mapped_column(ARRAY(String(66)), nullable=False)


class ConditionORM(Base):
    __tablename__ = "conditions"

    id: Mapped[str] = mapped_column(String(66), primary_key=True)
    outcome_slot_count: Mapped[int] = mapped_column(Integer, nullable=False)
    # NULL until the oracle reports a payout
    payout_numerators: Mapped[list[Decimal] | None] = mapped_column(
        ARRAY(UINT256), nullable=True
    )
    payout_denominator: Mapped[Decimal | None] = mapped_column(UINT256, nullable=True)


class TransactionORM(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(66), primary_key=True)  # tx hash
    user_address: Mapped[str] = mapped_column(String(42), nullable=False)
    market_address: Mapped[str] = mapped_column(String(42), nullable=False)
    outcome_index: Mapped[int] = mapped_column(Integer, nullable=False)
    trade_type: Mapped[str] = mapped_column(String(4), nullable=False)
    outcome_tokens_amount: Mapped[Decimal] = mapped_column(UINT256, nullable=False)
    trade_amount: Mapped[Decimal] = mapped_column(UINT256, nullable=False)

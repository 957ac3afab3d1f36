"""MetadataRepository — read-only lookups of market, condition and trade records.

Those tables are written by the market / condition / trade indexers; this
service never modifies them. Addresses are lower-cased on read so trade
positions share ids with the positions built from ingested events.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import TradeType
from src.pm_common.int_math import parse_amount
from src.pm_positions.domain.models import Condition, Market, Transaction

_GET_TRANSACTION_SQL = text("""
    SELECT id, user_address, market_address, outcome_index, trade_type,
           outcome_tokens_amount, trade_amount
    FROM transactions
    WHERE id = :id
""")

_GET_MARKET_SQL = text("""
    SELECT id, outcome_slot_count, condition_ids
    FROM fixed_product_market_makers
    WHERE id = :id
""")

_GET_CONDITION_SQL = text("""
    SELECT id, outcome_slot_count, payout_numerators, payout_denominator
    FROM conditions
    WHERE id = :id
""")


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        user=row.user_address.lower(),  # type: ignore[attr-defined]
        market=row.market_address.lower(),  # type: ignore[attr-defined]
        outcome_index=int(row.outcome_index),  # type: ignore[attr-defined]
        type=TradeType(row.trade_type),  # type: ignore[attr-defined]
        outcome_tokens_amount=parse_amount(row.outcome_tokens_amount),  # type: ignore[attr-defined]
        trade_amount=parse_amount(row.trade_amount),  # type: ignore[attr-defined]
    )


def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        outcome_slot_count=int(row.outcome_slot_count),  # type: ignore[attr-defined]
        condition_ids=list(row.condition_ids or []),  # type: ignore[attr-defined]
    )


def _row_to_condition(row: object) -> Condition:
    numerators = row.payout_numerators  # type: ignore[attr-defined]
    denominator = row.payout_denominator  # type: ignore[attr-defined]
    return Condition(
        id=row.id,  # type: ignore[attr-defined]
        outcome_slot_count=int(row.outcome_slot_count),  # type: ignore[attr-defined]
        payout_numerators=[parse_amount(n) for n in numerators] if numerators is not None else None,
        payout_denominator=parse_amount(denominator) if denominator is not None else None,
    )


class MetadataRepository:
    async def get_transaction(self, db: AsyncSession, tx_hash: str) -> Transaction | None:
        row = (await db.execute(_GET_TRANSACTION_SQL, {"id": tx_hash})).fetchone()
        return _row_to_transaction(row) if row else None

    async def get_market(self, db: AsyncSession, market_id: str) -> Market | None:
        row = (await db.execute(_GET_MARKET_SQL, {"id": market_id})).fetchone()
        return _row_to_market(row) if row else None

    async def get_condition(self, db: AsyncSession, condition_id: str) -> Condition | None:
        row = (await db.execute(_GET_CONDITION_SQL, {"id": condition_id})).fetchone()
        return _row_to_condition(row) if row else None

"""PositionRepository — concrete implementation of PositionRepositoryProtocol.

Loads return a zero position for keys that were never written.
Transaction ownership: the CALLER (PositionUpdateService) commits or rolls back,
so every position touched by one event is written in a single transaction.
"""

from collections.abc import Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.int_math import parse_amount
from src.pm_positions.domain.models import MarketPosition, PositionKey, zero_position

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_POSITION_COLUMNS = """
    id, user_address, market_address, outcome_index,
    quantity_bought, quantity_sold, net_quantity,
    value_bought, value_sold, net_value
"""

_GET_POSITIONS_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM market_positions
    WHERE id = ANY(:ids)
""")

_UPSERT_POSITION_SQL = text("""
    INSERT INTO market_positions
        (id, user_address, market_address, outcome_index,
         quantity_bought, quantity_sold, net_quantity,
         value_bought, value_sold, net_value)
    VALUES
        (:id, :user_address, :market_address, :outcome_index,
         :quantity_bought, :quantity_sold, :net_quantity,
         :value_bought, :value_sold, :net_value)
    ON CONFLICT (id) DO UPDATE
    SET quantity_bought = EXCLUDED.quantity_bought,
        quantity_sold   = EXCLUDED.quantity_sold,
        net_quantity    = EXCLUDED.net_quantity,
        value_bought    = EXCLUDED.value_bought,
        value_sold      = EXCLUDED.value_sold,
        net_value       = EXCLUDED.net_value,
        updated_at = NOW()
""")


def row_to_position(row: object) -> MarketPosition:
    return MarketPosition(
        user=row.user_address,  # type: ignore[attr-defined]
        market=row.market_address,  # type: ignore[attr-defined]
        outcome_index=int(row.outcome_index),  # type: ignore[attr-defined]
        quantity_bought=parse_amount(row.quantity_bought),  # type: ignore[attr-defined]
        quantity_sold=parse_amount(row.quantity_sold),  # type: ignore[attr-defined]
        net_quantity=parse_amount(row.net_quantity),  # type: ignore[attr-defined]
        value_bought=parse_amount(row.value_bought),  # type: ignore[attr-defined]
        value_sold=parse_amount(row.value_sold),  # type: ignore[attr-defined]
        net_value=parse_amount(row.net_value),  # type: ignore[attr-defined]
    )


def _position_params(position: MarketPosition) -> dict[str, object]:
    return {
        "id": position.id,
        "user_address": position.user,
        "market_address": position.market,
        "outcome_index": position.outcome_index,
        "quantity_bought": position.quantity_bought,
        "quantity_sold": position.quantity_sold,
        "net_quantity": position.net_quantity,
        "value_bought": position.value_bought,
        "value_sold": position.value_sold,
        "net_value": position.net_value,
    }


class PositionRepository:
    """Load-or-zero reads, batched upserts."""

    async def get(self, db: AsyncSession, key: PositionKey) -> MarketPosition:
        positions = await self.get_many(db, [key])
        return positions[0]

    async def get_many(
        self, db: AsyncSession, keys: Sequence[PositionKey]
    ) -> list[MarketPosition]:
        if not keys:
            return []
        ids = [k.position_id for k in keys]
        rows = (await db.execute(_GET_POSITIONS_SQL, {"ids": ids})).fetchall()
        stored = {row.id: row_to_position(row) for row in rows}
        return [stored.get(k.position_id) or zero_position(k) for k in keys]

    async def save(self, db: AsyncSession, position: MarketPosition) -> None:
        await db.execute(_UPSERT_POSITION_SQL, _position_params(position))

    async def save_all(
        self, db: AsyncSession, positions: Sequence[MarketPosition]
    ) -> None:
        if not positions:
            return
        await db.execute(_UPSERT_POSITION_SQL, [_position_params(p) for p in positions])

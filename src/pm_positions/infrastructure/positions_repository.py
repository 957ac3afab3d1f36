# src/pm_positions/infrastructure/positions_repository.py
"""Read-only positions queries for the API."""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_positions.domain.models import MarketPosition
from src.pm_positions.infrastructure.persistence import row_to_position

_COLUMNS = """
    id, user_address, market_address, outcome_index,
    quantity_bought, quantity_sold, net_quantity,
    value_bought, value_sold, net_value
"""

_LIST_BY_USER_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM market_positions
    WHERE user_address = :user
      AND (CAST(:market AS VARCHAR) IS NULL OR market_address = :market)
    ORDER BY market_address, outcome_index
""")

_LIST_BY_MARKET_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM market_positions
    WHERE market_address = :market
    ORDER BY user_address, outcome_index
""")


class PositionsQueryRepository:
    async def list_by_user(
        self, user: str, db: AsyncSession, market: str | None = None
    ) -> list[MarketPosition]:
        rows = (
            await db.execute(_LIST_BY_USER_SQL, {"user": user, "market": market})
        ).fetchall()
        return [row_to_position(r) for r in rows]

    async def list_by_market(self, market: str, db: AsyncSession) -> list[MarketPosition]:
        rows = (await db.execute(_LIST_BY_MARKET_SQL, {"market": market})).fetchall()
        return [row_to_position(r) for r in rows]

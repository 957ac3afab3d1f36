"""Repository Protocols — dependency inversion for testability.

Unit tests inject a mock that conforms to these Protocols.
Infrastructure layer provides the real implementations.
"""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_positions.domain.models import (
    Condition,
    Market,
    MarketPosition,
    PositionKey,
    Transaction,
)


class PositionRepositoryProtocol(Protocol):
    async def get(self, db: AsyncSession, key: PositionKey) -> MarketPosition:
        """Stored position, or a zero position (not persisted) if none exists."""
        ...

    async def get_many(
        self, db: AsyncSession, keys: Sequence[PositionKey]
    ) -> list[MarketPosition]: ...

    async def save(self, db: AsyncSession, position: MarketPosition) -> None: ...

    async def save_all(
        self, db: AsyncSession, positions: Sequence[MarketPosition]
    ) -> None: ...


class MetadataRepositoryProtocol(Protocol):
    async def get_transaction(
        self, db: AsyncSession, tx_hash: str
    ) -> Transaction | None: ...

    async def get_market(self, db: AsyncSession, market_id: str) -> Market | None: ...

    async def get_condition(
        self, db: AsyncSession, condition_id: str
    ) -> Condition | None: ...

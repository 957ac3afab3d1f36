"""PositionUpdateService — applies one decoded event at a time.

For every event:
  1. resolve metadata (transaction / market / condition)
  2. check preconditions, raising EventRejectedError before anything is written
  3. load the affected positions and run the pure reducer
  4. save all touched positions and commit once (one transaction per event)

A rejected event is rolled back, reported as one diagnostic and skipped; the
next event is processed normally. Any other error (storage) propagates.
Events must arrive in chain order: nothing here deduplicates or reorders.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import EventStatus, EventType
from src.pm_common.errors import (
    ConditionNotFoundError,
    ConditionNotResolvedError,
    EventRejectedError,
    InvalidEventError,
    InvalidPayoutError,
    MarketNotFoundError,
    MultiConditionMarketError,
    OutcomeSlotMismatchError,
    TransactionNotFoundError,
)
from src.pm_positions.domain import reducers
from src.pm_positions.domain.diagnostics import DiagnosticSink, from_rejection
from src.pm_positions.domain.events import (
    FundingAddedEvent,
    FundingRemovedEvent,
    PayoutRedemptionEvent,
    PositionEvent,
    PositionsMergeEvent,
    PositionSplitEvent,
    TradeEvent,
)
from src.pm_positions.domain.models import Condition, Market, MarketPosition, PositionKey
from src.pm_positions.domain.repository import (
    MetadataRepositoryProtocol,
    PositionRepositoryProtocol,
)
from src.pm_positions.infrastructure.metadata_repository import MetadataRepository
from src.pm_positions.infrastructure.persistence import PositionRepository

logger = logging.getLogger(__name__)


@dataclass
class EventResult:
    event_type: EventType
    status: EventStatus
    positions: list[MarketPosition] = field(default_factory=list)
    error_code: int | None = None
    reason: str | None = None


class PositionUpdateService:
    def __init__(
        self,
        positions: PositionRepositoryProtocol | None = None,
        metadata: MetadataRepositoryProtocol | None = None,
    ) -> None:
        self._positions: PositionRepositoryProtocol = positions or PositionRepository()
        self._metadata: MetadataRepositoryProtocol = metadata or MetadataRepository()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def apply(
        self, db: AsyncSession, event: PositionEvent, diagnostics: DiagnosticSink
    ) -> EventResult:
        event_type = event_type_of(event)
        try:
            updated = await self._reduce(db, event, diagnostics)
            await self._positions.save_all(db, updated)
            await db.commit()
        except EventRejectedError as exc:
            await db.rollback()
            diagnostics.emit(from_rejection(exc))
            return EventResult(
                event_type=event_type,
                status=EventStatus.SKIPPED,
                error_code=exc.code,
                reason=exc.message,
            )
        except Exception:
            await db.rollback()
            raise
        logger.debug("Applied %s event: %d positions updated", event_type.value, len(updated))
        return EventResult(event_type=event_type, status=EventStatus.APPLIED, positions=updated)

    async def apply_many(
        self,
        db: AsyncSession,
        events: Sequence[PositionEvent],
        diagnostics: DiagnosticSink,
    ) -> list[EventResult]:
        """Apply events strictly in the given order; skipped events do not stop the batch."""
        results: list[EventResult] = []
        for event in events:
            results.append(await self.apply(db, event, diagnostics))
        return results

    async def _reduce(
        self, db: AsyncSession, event: PositionEvent, diagnostics: DiagnosticSink
    ) -> list[MarketPosition]:
        if isinstance(event, TradeEvent):
            return await self.on_trade(db, event, diagnostics)
        elif isinstance(event, PositionSplitEvent):
            return await self.on_split(db, event, diagnostics)
        elif isinstance(event, PositionsMergeEvent):
            return await self.on_merge(db, event, diagnostics)
        elif isinstance(event, PayoutRedemptionEvent):
            return await self.on_redemption(db, event, diagnostics)
        elif isinstance(event, FundingAddedEvent):
            return await self.on_funding_added(db, event, diagnostics)
        elif isinstance(event, FundingRemovedEvent):
            return await self.on_funding_removed(db, event, diagnostics)
        raise TypeError(f"Unsupported event: {type(event).__name__}")

    # ------------------------------------------------------------------
    # Per-event handlers: return the reconciled positions to persist
    # ------------------------------------------------------------------

    async def on_trade(
        self, db: AsyncSession, event: TradeEvent, diagnostics: DiagnosticSink
    ) -> list[MarketPosition]:
        transaction = await self._metadata.get_transaction(db, event.transaction_hash)
        if transaction is None:
            raise TransactionNotFoundError(event.transaction_hash)
        if transaction.outcome_index < 0:
            raise InvalidEventError(
                f"transaction {transaction.id} has outcome index {transaction.outcome_index}",
                user=transaction.user,
                market=transaction.market,
            )
        key = PositionKey(transaction.user, transaction.market, transaction.outcome_index)
        position = await self._positions.get(db, key)
        return [reducers.apply_trade(position, transaction, diagnostics)]

    async def on_split(
        self, db: AsyncSession, event: PositionSplitEvent, diagnostics: DiagnosticSink
    ) -> list[MarketPosition]:
        market, _ = await self._single_condition_market(db, event.market, event.condition_id)
        positions = await self._load_all_outcomes(db, event.user, market.id, market.outcome_slot_count)
        return reducers.apply_split(positions, event.amount, market.outcome_slot_count, diagnostics)

    async def on_merge(
        self, db: AsyncSession, event: PositionsMergeEvent, diagnostics: DiagnosticSink
    ) -> list[MarketPosition]:
        market, _ = await self._single_condition_market(db, event.market, event.condition_id)
        positions = await self._load_all_outcomes(db, event.user, market.id, market.outcome_slot_count)
        return reducers.apply_merge(positions, event.amount, market.outcome_slot_count, diagnostics)

    async def on_redemption(
        self, db: AsyncSession, event: PayoutRedemptionEvent, diagnostics: DiagnosticSink
    ) -> list[MarketPosition]:
        market, condition = await self._single_condition_market(
            db, event.market, event.condition_id
        )
        if not condition.is_resolved:
            raise ConditionNotResolvedError(condition.id, market.id)
        self._check_payout(condition, market)

        # Each slot is redeemed once; a repeated index would redeem a stale balance.
        outcome_indices = list(dict.fromkeys(event.outcome_indices))
        for index in outcome_indices:
            if not 0 <= index < market.outcome_slot_count:
                raise InvalidEventError(
                    f"redeemed outcome {index} outside 0..{market.outcome_slot_count - 1}",
                    user=event.user,
                    market=market.id,
                )

        keys = [PositionKey(event.user, market.id, i) for i in outcome_indices]
        positions = await self._positions.get_many(db, keys)
        return reducers.apply_redemption(positions, condition, diagnostics)

    async def on_funding_added(
        self, db: AsyncSession, event: FundingAddedEvent, diagnostics: DiagnosticSink
    ) -> list[MarketPosition]:
        market = await self._require_market(db, event.market)
        self._check_amounts(event.amounts_added, market, event.funder, "amounts_added")
        positions = await self._load_all_outcomes(db, event.funder, market.id, len(event.amounts_added))
        return reducers.apply_funding_added(
            positions, event.amounts_added, event.shares_minted, diagnostics
        )

    async def on_funding_removed(
        self, db: AsyncSession, event: FundingRemovedEvent, diagnostics: DiagnosticSink
    ) -> list[MarketPosition]:
        market = await self._require_market(db, event.market)
        self._check_amounts(event.amounts_removed, market, event.funder, "amounts_removed")
        positions = await self._load_all_outcomes(db, event.funder, market.id, len(event.amounts_removed))
        return reducers.apply_funding_removed(
            positions, event.amounts_removed, event.shares_burnt, diagnostics
        )

    # ------------------------------------------------------------------
    # Lookups and preconditions
    # ------------------------------------------------------------------

    async def _require_market(self, db: AsyncSession, market_id: str) -> Market:
        market = await self._metadata.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    async def _single_condition_market(
        self, db: AsyncSession, market_id: str, event_condition_id: str | None
    ) -> tuple[Market, Condition]:
        """Split, merge and redemption accounting is only defined for
        markets backed by exactly one condition with the same slot count."""
        market = await self._require_market(db, market_id)
        if len(market.condition_ids) != 1:
            raise MultiConditionMarketError(
                market.id, f"{len(market.condition_ids)} conditions"
            )
        condition_id = market.condition_ids[0]
        if event_condition_id is not None and event_condition_id != condition_id:
            raise MultiConditionMarketError(
                market.id,
                f"event condition {event_condition_id} is not market condition {condition_id}",
            )
        condition = await self._metadata.get_condition(db, condition_id)
        if condition is None:
            raise ConditionNotFoundError(condition_id, market.id)
        if condition.outcome_slot_count != market.outcome_slot_count:
            raise OutcomeSlotMismatchError(
                market.id, market.outcome_slot_count, condition.outcome_slot_count
            )
        return market, condition

    @staticmethod
    def _check_payout(condition: Condition, market: Market) -> None:
        numerators = condition.payout_numerators or []
        if len(numerators) != market.outcome_slot_count:
            raise InvalidPayoutError(
                condition.id,
                market.id,
                f"{len(numerators)} payout numerators for "
                f"{market.outcome_slot_count} outcomes",
            )
        if condition.payout_denominator is None or condition.payout_denominator <= 0:
            raise InvalidPayoutError(
                condition.id, market.id, f"payout denominator {condition.payout_denominator}"
            )

    @staticmethod
    def _check_amounts(
        amounts: Sequence[int], market: Market, user: str, name: str
    ) -> None:
        if not amounts:
            raise InvalidEventError(f"{name} is empty", user=user, market=market.id)
        if len(amounts) != market.outcome_slot_count:
            raise InvalidEventError(
                f"{name} has {len(amounts)} entries, market has "
                f"{market.outcome_slot_count} outcomes",
                user=user,
                market=market.id,
            )

    async def _load_all_outcomes(
        self, db: AsyncSession, user: str, market_id: str, outcome_count: int
    ) -> list[MarketPosition]:
        keys = [PositionKey(user, market_id, i) for i in range(outcome_count)]
        return await self._positions.get_many(db, keys)


def event_type_of(event: PositionEvent) -> EventType:
    if isinstance(event, TradeEvent):
        return EventType.TRADE
    elif isinstance(event, PositionSplitEvent):
        return EventType.SPLIT
    elif isinstance(event, PositionsMergeEvent):
        return EventType.MERGE
    elif isinstance(event, PayoutRedemptionEvent):
        return EventType.REDEMPTION
    elif isinstance(event, FundingAddedEvent):
        return EventType.FUNDING_ADDED
    elif isinstance(event, FundingRemovedEvent):
        return EventType.FUNDING_REMOVED
    raise TypeError(f"Unsupported event: {type(event).__name__}")

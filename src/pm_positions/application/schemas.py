"""Pydantic schemas for the events ingest API and positions API.

Amounts are uint256 base units. Requests accept JSON integers or decimal
strings; responses always render amounts as decimal strings so JavaScript
consumers do not lose precision.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from src.pm_positions.application.service import EventResult
from src.pm_positions.domain.diagnostics import Diagnostic
from src.pm_positions.domain.events import (
    FundingAddedEvent,
    FundingRemovedEvent,
    PayoutRedemptionEvent,
    PositionEvent,
    PositionsMergeEvent,
    PositionSplitEvent,
    TradeEvent,
)
from src.pm_positions.domain.models import MarketPosition

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
BYTES32_PATTERN = r"^0x[0-9a-fA-F]{64}$"

Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]
Bytes32 = Annotated[str, Field(pattern=BYTES32_PATTERN)]
Amount = Annotated[int, Field(ge=0)]


class _EventIn(BaseModel):
    @field_validator(
        "user", "market", "funder", "condition_id", "transaction_hash",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def lowercase_hex(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value


# ---------------------------------------------------------------------------
# Event requests
# ---------------------------------------------------------------------------


class TradeEventIn(_EventIn):
    event_type: Literal["trade"]
    transaction_hash: Bytes32

    def to_domain(self) -> TradeEvent:
        return TradeEvent(transaction_hash=self.transaction_hash)


class SplitEventIn(_EventIn):
    event_type: Literal["split"]
    user: Address
    market: Address
    amount: Amount
    condition_id: Bytes32 | None = None

    def to_domain(self) -> PositionSplitEvent:
        return PositionSplitEvent(
            user=self.user, market=self.market, amount=self.amount,
            condition_id=self.condition_id,
        )


class MergeEventIn(_EventIn):
    event_type: Literal["merge"]
    user: Address
    market: Address
    amount: Amount
    condition_id: Bytes32 | None = None

    def to_domain(self) -> PositionsMergeEvent:
        return PositionsMergeEvent(
            user=self.user, market=self.market, amount=self.amount,
            condition_id=self.condition_id,
        )


class RedemptionEventIn(_EventIn):
    event_type: Literal["redemption"]
    user: Address
    market: Address
    condition_id: Bytes32
    outcome_indices: list[Annotated[int, Field(ge=0)]] = Field(min_length=1)

    def to_domain(self) -> PayoutRedemptionEvent:
        return PayoutRedemptionEvent(
            user=self.user, market=self.market, condition_id=self.condition_id,
            outcome_indices=tuple(self.outcome_indices),
        )


class FundingAddedEventIn(_EventIn):
    event_type: Literal["funding_added"]
    funder: Address
    market: Address
    amounts_added: list[Amount] = Field(min_length=1)
    shares_minted: Amount

    def to_domain(self) -> FundingAddedEvent:
        return FundingAddedEvent(
            funder=self.funder, market=self.market,
            amounts_added=tuple(self.amounts_added), shares_minted=self.shares_minted,
        )


class FundingRemovedEventIn(_EventIn):
    event_type: Literal["funding_removed"]
    funder: Address
    market: Address
    amounts_removed: list[Amount] = Field(min_length=1)
    shares_burnt: Amount

    def to_domain(self) -> FundingRemovedEvent:
        return FundingRemovedEvent(
            funder=self.funder, market=self.market,
            amounts_removed=tuple(self.amounts_removed), shares_burnt=self.shares_burnt,
        )


EventIn = Annotated[
    TradeEventIn
    | SplitEventIn
    | MergeEventIn
    | RedemptionEventIn
    | FundingAddedEventIn
    | FundingRemovedEventIn,
    Field(discriminator="event_type"),
]


class EventBatchRequest(BaseModel):
    """Decoded events in chain order (block number, then log index)."""

    events: list[EventIn] = Field(min_length=1)

    def to_domain(self) -> list[PositionEvent]:
        return [e.to_domain() for e in self.events]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class PositionResponse(BaseModel):
    id: str
    user: str
    market: str
    outcome_index: int
    quantity_bought: str
    quantity_sold: str
    net_quantity: str
    value_bought: str
    value_sold: str
    net_value: str

    @classmethod
    def from_domain(cls, p: MarketPosition) -> "PositionResponse":
        return cls(
            id=p.id,
            user=p.user,
            market=p.market,
            outcome_index=p.outcome_index,
            quantity_bought=str(p.quantity_bought),
            quantity_sold=str(p.quantity_sold),
            net_quantity=str(p.net_quantity),
            value_bought=str(p.value_bought),
            value_sold=str(p.value_sold),
            net_value=str(p.net_value),
        )


class PositionListResponse(BaseModel):
    items: list[PositionResponse]
    total: int


class DiagnosticResponse(BaseModel):
    kind: str
    message: str
    code: int | None = None
    user: str | None = None
    market: str | None = None
    outcome_index: int | None = None
    reference: str | None = None

    @classmethod
    def from_domain(cls, d: Diagnostic) -> "DiagnosticResponse":
        return cls(
            kind=d.kind.value,
            message=d.message,
            code=d.code,
            user=d.user,
            market=d.market,
            outcome_index=d.outcome_index,
            reference=d.reference,
        )


class EventResultResponse(BaseModel):
    index: int
    event_type: str
    status: str
    positions_updated: int
    error_code: int | None = None
    reason: str | None = None


class EventBatchResponse(BaseModel):
    applied: int
    skipped: int
    results: list[EventResultResponse]
    diagnostics: list[DiagnosticResponse]

    @classmethod
    def from_results(
        cls, results: list[EventResult], diagnostics: list[Diagnostic]
    ) -> "EventBatchResponse":
        items = [
            EventResultResponse(
                index=i,
                event_type=r.event_type.value,
                status=r.status.value,
                positions_updated=len(r.positions),
                error_code=r.error_code,
                reason=r.reason,
            )
            for i, r in enumerate(results)
        ]
        applied = sum(1 for r in items if r.status == "APPLIED")
        return cls(
            applied=applied,
            skipped=len(items) - applied,
            results=items,
            diagnostics=[DiagnosticResponse.from_domain(d) for d in diagnostics],
        )

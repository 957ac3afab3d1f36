"""Domain models for pm_positions — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from typing import NamedTuple

from src.pm_common.enums import TradeType


class PositionKey(NamedTuple):
    """Identity of a MarketPosition: (user, market, outcome_index)."""

    user: str
    market: str
    outcome_index: int

    @property
    def position_id(self) -> str:
        # Addresses are fixed-length lower-case hex, so plain concatenation is unique.
        return f"{self.user}{self.market}{self.outcome_index}"


@dataclass
class MarketPosition:
    user: str
    market: str
    outcome_index: int
    quantity_bought: int = 0     # outcome tokens received
    quantity_sold: int = 0       # outcome tokens given up
    net_quantity: int = 0        # quantity_bought - quantity_sold
    value_bought: int = 0        # collateral paid, base units
    value_sold: int = 0          # collateral received, base units
    net_value: int = 0           # value_bought - value_sold

    @property
    def key(self) -> PositionKey:
        return PositionKey(self.user, self.market, self.outcome_index)

    @property
    def id(self) -> str:
        return self.key.position_id


def zero_position(key: PositionKey) -> MarketPosition:
    """Canonical zero-valued position for a key. Not persisted."""
    return MarketPosition(
        user=key.user,
        market=key.market,
        outcome_index=key.outcome_index,
    )


@dataclass
class Market:
    """Fixed-product market maker metadata (read-only)."""

    id: str
    outcome_slot_count: int
    condition_ids: list[str] = field(default_factory=list)


@dataclass
class Condition:
    """Conditional-tokens condition (read-only). Payout fields set on resolution."""

    id: str
    outcome_slot_count: int
    payout_numerators: list[int] | None = None
    payout_denominator: int | None = None

    @property
    def is_resolved(self) -> bool:
        return self.payout_numerators is not None and self.payout_denominator is not None


@dataclass
class Transaction:
    """A recorded market-maker trade, keyed by transaction hash."""

    id: str
    user: str
    market: str
    outcome_index: int
    type: TradeType
    outcome_tokens_amount: int
    trade_amount: int

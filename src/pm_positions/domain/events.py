"""Decoded on-chain events consumed by the position engine.

Addresses are lower-case hex strings. `user` / `funder` is the transaction
sender, `market` the fixed-product market maker the event belongs to.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TradeEvent:
    """FPMMBuy / FPMMSell — details come from the Transaction record."""

    transaction_hash: str


@dataclass(frozen=True)
class PositionSplitEvent:
    user: str
    market: str
    amount: int                       # collateral split into one full set
    condition_id: str | None = None


@dataclass(frozen=True)
class PositionsMergeEvent:
    user: str
    market: str
    amount: int                       # full sets merged back into collateral
    condition_id: str | None = None


@dataclass(frozen=True)
class PayoutRedemptionEvent:
    user: str
    market: str
    condition_id: str
    outcome_indices: tuple[int, ...]  # redeemed outcome slots


@dataclass(frozen=True)
class FundingAddedEvent:
    funder: str
    market: str
    amounts_added: tuple[int, ...]    # outcome tokens added, one per outcome
    shares_minted: int


@dataclass(frozen=True)
class FundingRemovedEvent:
    funder: str
    market: str
    amounts_removed: tuple[int, ...]  # outcome tokens sent back, one per outcome
    shares_burnt: int


PositionEvent = (
    TradeEvent
    | PositionSplitEvent
    | PositionsMergeEvent
    | PayoutRedemptionEvent
    | FundingAddedEvent
    | FundingRemovedEvent
)

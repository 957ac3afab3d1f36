"""Global enums — values must match DB CHECK constraints and API payloads exactly."""

from enum import Enum


class TradeType(str, Enum):
    """Transaction.type as recorded by the trade indexer."""
    BUY = "Buy"
    SELL = "Sell"


class EventType(str, Enum):
    """Discriminator of decoded on-chain events accepted by POST /events."""
    TRADE = "trade"
    SPLIT = "split"
    MERGE = "merge"
    REDEMPTION = "redemption"
    FUNDING_ADDED = "funding_added"
    FUNDING_REMOVED = "funding_removed"


class DiagnosticKind(str, Enum):
    # Referenced Transaction / Market / Condition missing, or Condition unresolved
    LOOKUP_FAILURE = "LOOKUP_FAILURE"
    # Event violates an accounting precondition (multi-condition market, bad vectors)
    PRECONDITION_FAILURE = "PRECONDITION_FAILURE"
    # Position persisted with net_quantity < 0
    NEGATIVE_NET_QUANTITY = "NEGATIVE_NET_QUANTITY"


class EventStatus(str, Enum):
    APPLIED = "APPLIED"
    SKIPPED = "SKIPPED"

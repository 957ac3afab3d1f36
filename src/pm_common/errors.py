"""Unified error codes and custom exceptions.

Error code ranges:
  3xxx: Market / Condition metadata
  6xxx: Event processing
"""

from src.pm_common.enums import DiagnosticKind


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class EventRejectedError(AppError):
    """An event that must be skipped without touching any position.

    Raised before anything is written; the event processor turns it into a
    single diagnostic and moves on to the next event.
    """

    kind: DiagnosticKind = DiagnosticKind.PRECONDITION_FAILURE

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 422,
        *,
        user: str | None = None,
        market: str | None = None,
        reference: str | None = None,
    ) -> None:
        self.user = user
        self.market = market
        self.reference = reference
        super().__init__(code, message, http_status)


class LookupFailureError(EventRejectedError):
    kind = DiagnosticKind.LOOKUP_FAILURE


# --- 3xxx: Market / Condition ---

class MarketNotFoundError(LookupFailureError):
    def __init__(self, market_id: str) -> None:
        super().__init__(
            3001, f"Market not found: {market_id}", 404,
            market=market_id, reference=market_id,
        )


class ConditionNotFoundError(LookupFailureError):
    def __init__(self, condition_id: str, market_id: str | None = None) -> None:
        super().__init__(
            3003, f"Condition not found: {condition_id}", 404,
            market=market_id, reference=condition_id,
        )


class ConditionNotResolvedError(LookupFailureError):
    def __init__(self, condition_id: str, market_id: str | None = None) -> None:
        super().__init__(
            3004,
            f"Failed to update market positions: condition {condition_id} has not resolved",
            422,
            market=market_id,
            reference=condition_id,
        )


class MultiConditionMarketError(EventRejectedError):
    def __init__(self, market_id: str, detail: str) -> None:
        super().__init__(
            3005, f"Market {market_id} is not a single-condition market: {detail}",
            market=market_id, reference=market_id,
        )


class OutcomeSlotMismatchError(EventRejectedError):
    def __init__(self, market_id: str, market_slots: int, condition_slots: int) -> None:
        super().__init__(
            3006,
            f"Market {market_id} has {market_slots} outcome slots "
            f"but its condition has {condition_slots}",
            market=market_id,
            reference=market_id,
        )


class InvalidPayoutError(EventRejectedError):
    def __init__(self, condition_id: str, market_id: str, detail: str) -> None:
        super().__init__(
            3007, f"Condition {condition_id} has an invalid payout: {detail}",
            market=market_id, reference=condition_id,
        )


# --- 6xxx: Event processing ---

class TransactionNotFoundError(LookupFailureError):
    def __init__(self, tx_hash: str) -> None:
        super().__init__(
            6001, f"Could not find a transaction with hash: {tx_hash}", 404,
            reference=tx_hash,
        )


class InvalidEventError(EventRejectedError):
    def __init__(
        self,
        detail: str,
        *,
        user: str | None = None,
        market: str | None = None,
    ) -> None:
        super().__init__(6002, f"Invalid event: {detail}", user=user, market=market)


class BatchTooLargeError(AppError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(6003, f"Event batch of {size} exceeds limit of {limit}", 413)

"""Position reducers — one accounting rule per on-chain event type.

Every reducer is pure: it takes the current positions (stored or zero) and the
event amounts, and returns new positions that have already been reconciled.
Loading, persisting and metadata checks live in the application service.

Split, merge and redemption are only valid for markets backed by a single
condition whose outcome slot count equals the market's; the service enforces
that before calling in here.
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace

from src.pm_common.enums import TradeType
from src.pm_common.errors import ConditionNotResolvedError
from src.pm_common.int_math import div_trunc, max_amount
from src.pm_positions.domain.diagnostics import DiagnosticSink
from src.pm_positions.domain.models import Condition, MarketPosition, Transaction
from src.pm_positions.domain.reconciler import reconcile


def _check_outcome_count(positions: Sequence[MarketPosition], expected: int) -> None:
    if len(positions) != expected:
        raise ValueError(f"Expected {expected} positions, got {len(positions)}")


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------


def apply_trade(
    position: MarketPosition, transaction: Transaction, diagnostics: DiagnosticSink
) -> MarketPosition:
    """Buy adds to the bought totals, Sell to the sold totals."""
    if transaction.type == TradeType.BUY:
        updated = replace(
            position,
            quantity_bought=position.quantity_bought + transaction.outcome_tokens_amount,
            value_bought=position.value_bought + transaction.trade_amount,
        )
    else:
        updated = replace(
            position,
            quantity_sold=position.quantity_sold + transaction.outcome_tokens_amount,
            value_sold=position.value_sold + transaction.trade_amount,
        )
    return reconcile(updated, diagnostics)


# ---------------------------------------------------------------------------
# Split / merge
# ---------------------------------------------------------------------------


def apply_split(
    positions: Sequence[MarketPosition],
    amount: int,
    outcome_slot_count: int,
    diagnostics: DiagnosticSink,
) -> list[MarketPosition]:
    """Splitting `amount` collateral mints `amount` tokens of every outcome.

    The user effectively buys every outcome at the same price, so each one is
    valued at amount / N.
    """
    _check_outcome_count(positions, outcome_slot_count)
    split_value = div_trunc(amount, outcome_slot_count)
    return [
        reconcile(
            replace(
                p,
                quantity_bought=p.quantity_bought + amount,
                value_bought=p.value_bought + split_value,
            ),
            diagnostics,
        )
        for p in positions
    ]


def apply_merge(
    positions: Sequence[MarketPosition],
    amount: int,
    outcome_slot_count: int,
    diagnostics: DiagnosticSink,
) -> list[MarketPosition]:
    """Merging `amount` full sets sells every outcome for amount / N each."""
    _check_outcome_count(positions, outcome_slot_count)
    # TODO: weight by the market maker's outcome prices instead of equal shares.
    merge_value = div_trunc(amount, outcome_slot_count)
    return [
        reconcile(
            replace(
                p,
                quantity_sold=p.quantity_sold + amount,
                value_sold=p.value_sold + merge_value,
            ),
            diagnostics,
        )
        for p in positions
    ]


# ---------------------------------------------------------------------------
# Redemption
# ---------------------------------------------------------------------------


def redemption_value(net_quantity: int, numerator: int, denominator: int) -> int:
    return div_trunc(net_quantity * numerator, denominator)


def apply_redemption(
    positions: Sequence[MarketPosition],
    condition: Condition,
    diagnostics: DiagnosticSink,
) -> list[MarketPosition]:
    """Redeem the full balance of each position at the condition's payout ratio.

    Redemption is all-or-nothing, so net_quantity goes back to zero and the
    payout is booked as value_sold.
    """
    if condition.payout_numerators is None or condition.payout_denominator is None:
        raise ConditionNotResolvedError(condition.id)
    numerators = condition.payout_numerators
    denominator = condition.payout_denominator

    redeemed: list[MarketPosition] = []
    for p in positions:
        value = redemption_value(p.net_quantity, numerators[p.outcome_index], denominator)
        redeemed.append(
            reconcile(
                replace(
                    p,
                    quantity_sold=p.quantity_sold + p.net_quantity,
                    value_sold=p.value_sold + value,
                ),
                diagnostics,
            )
        )
    return redeemed


# ---------------------------------------------------------------------------
# Liquidity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FundingBreakdown:
    """How a FundingAdded event splits into pool tokens and funder refunds."""

    added_funds: int
    total_refunded_value: int
    refunded_amounts: tuple[int, ...]
    total_refunded_outcome_tokens: int
    refund_values: tuple[int, ...]


def funding_added_breakdown(amounts_added: Sequence[int], shares_minted: int) -> FundingBreakdown:
    # The pool takes the full balance of the cheapest outcome, so the largest
    # amount added equals the collateral the funder split.
    added_funds = max_amount(amounts_added)
    total_refunded_value = added_funds - shares_minted

    refunded = tuple(added_funds - a for a in amounts_added)
    total_refunded = sum(refunded)

    # Refund value is weighted by each outcome's share of all refunded tokens.
    if total_refunded > 0:
        values = tuple(div_trunc(total_refunded_value * r, total_refunded) for r in refunded)
    else:
        values = tuple(0 for _ in refunded)

    return FundingBreakdown(
        added_funds=added_funds,
        total_refunded_value=total_refunded_value,
        refunded_amounts=refunded,
        total_refunded_outcome_tokens=total_refunded,
        refund_values=values,
    )


def apply_funding_added(
    positions: Sequence[MarketPosition],
    amounts_added: Sequence[int],
    shares_minted: int,
    diagnostics: DiagnosticSink,
) -> list[MarketPosition]:
    """Book the outcome tokens refunded to a liquidity provider."""
    _check_outcome_count(positions, len(amounts_added))
    breakdown = funding_added_breakdown(amounts_added, shares_minted)
    return [
        reconcile(
            replace(
                p,
                quantity_bought=p.quantity_bought + refunded,
                value_bought=p.value_bought + value,
            ),
            diagnostics,
        )
        for p, refunded, value in zip(
            positions, breakdown.refunded_amounts, breakdown.refund_values
        )
    ]


def apply_funding_removed(
    positions: Sequence[MarketPosition],
    amounts_removed: Sequence[int],
    shares_burnt: int,
    diagnostics: DiagnosticSink,
) -> list[MarketPosition]:
    """Book the outcome tokens a liquidity provider withdraws.

    Each share is valued at one unit of collateral, and tokens leave the pool in
    proportion to its balances, so every outcome gets shares_burnt / N.
    """
    _check_outcome_count(positions, len(amounts_removed))
    price_paid = div_trunc(shares_burnt, len(amounts_removed))
    return [
        reconcile(
            replace(
                p,
                quantity_bought=p.quantity_bought + removed,
                value_bought=p.value_bought + price_paid,
            ),
            diagnostics,
        )
        for p, removed in zip(positions, amounts_removed)
    ]

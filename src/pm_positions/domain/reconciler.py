"""Net-position reconciliation, run once per position touched by an event."""

from dataclasses import replace

from src.pm_positions.domain.diagnostics import DiagnosticSink, negative_net_quantity
from src.pm_positions.domain.models import MarketPosition


def reconcile(position: MarketPosition, diagnostics: DiagnosticSink) -> MarketPosition:
    """Recompute net_quantity / net_value from the gross totals.

    A negative net_quantity is reported, never clamped: the position is still
    returned (and persisted by the caller) so the anomaly stays visible.
    """
    updated = replace(
        position,
        net_quantity=position.quantity_bought - position.quantity_sold,
        net_value=position.value_bought - position.value_sold,
    )
    if updated.net_quantity < 0:
        diagnostics.emit(
            negative_net_quantity(
                updated.user, updated.market, updated.outcome_index, updated.net_quantity
            )
        )
    return updated

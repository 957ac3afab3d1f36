"""Diagnostic channel for lookup failures and accounting anomalies.

Diagnostics never abort processing. They are collected per request so callers
(and tests) can inspect them, and logged for offline investigation.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from src.pm_common.enums import DiagnosticKind
from src.pm_common.errors import EventRejectedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    user: str | None = None
    market: str | None = None
    outcome_index: int | None = None
    reference: str | None = None      # tx hash / condition id / market id
    code: int | None = None


class DiagnosticSink(Protocol):
    def emit(self, diagnostic: Diagnostic) -> None: ...


class DiagnosticCollector:
    """Default sink: keeps diagnostics in emission order and logs each one."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)
        if diagnostic.kind == DiagnosticKind.PRECONDITION_FAILURE:
            logger.warning("%s: %s", diagnostic.kind.value, diagnostic.message)
        else:
            logger.error("%s: %s", diagnostic.kind.value, diagnostic.message)

    @property
    def items(self) -> list[Diagnostic]:
        return list(self._items)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    def __len__(self) -> int:
        return len(self._items)


def negative_net_quantity(
    user: str, market: str, outcome_index: int, net_quantity: int
) -> Diagnostic:
    # A user has sold more tokens than they received: balances are tracked wrong,
    # or tokens were transferred in directly before being sold.
    return Diagnostic(
        kind=DiagnosticKind.NEGATIVE_NET_QUANTITY,
        message=(
            f"Invalid position: user {user} has negative netQuantity "
            f"({net_quantity}) on outcome {outcome_index} on market {market}"
        ),
        user=user,
        market=market,
        outcome_index=outcome_index,
    )


def from_rejection(exc: EventRejectedError) -> Diagnostic:
    return Diagnostic(
        kind=exc.kind,
        message=exc.message,
        user=exc.user,
        market=exc.market,
        reference=exc.reference,
        code=exc.code,
    )

# tests/unit/test_event_schemas.py
"""Unit tests for event ingest and position response schemas."""
import pytest
from pydantic import ValidationError

from src.pm_common.enums import DiagnosticKind, EventStatus, EventType
from src.pm_positions.application.schemas import (
    EventBatchRequest,
    EventBatchResponse,
    PositionResponse,
)
from src.pm_positions.application.service import EventResult
from src.pm_positions.domain.diagnostics import Diagnostic
from src.pm_positions.domain.events import (
    FundingAddedEvent,
    PayoutRedemptionEvent,
    PositionSplitEvent,
    TradeEvent,
)
from src.pm_positions.domain.models import MarketPosition

USER = "0x" + "A" * 40
MARKET = "0x" + "b" * 40
CONDITION = "0x" + "C" * 64
TX_HASH = "0x" + "d" * 64


class TestEventBatchRequest:
    def test_discriminates_on_event_type(self) -> None:
        req = EventBatchRequest.model_validate({"events": [
            {"event_type": "trade", "transaction_hash": TX_HASH},
            {"event_type": "split", "user": USER, "market": MARKET, "amount": "1000"},
            {
                "event_type": "redemption", "user": USER, "market": MARKET,
                "condition_id": CONDITION, "outcome_indices": [0, 1],
            },
            {
                "event_type": "funding_added", "funder": USER, "market": MARKET,
                "amounts_added": [100, 80], "shares_minted": 80,
            },
        ]})

        events = req.to_domain()

        assert isinstance(events[0], TradeEvent)
        assert isinstance(events[1], PositionSplitEvent)
        assert events[1].amount == 1000
        assert events[1].condition_id is None
        assert isinstance(events[2], PayoutRedemptionEvent)
        assert events[2].outcome_indices == (0, 1)
        assert isinstance(events[3], FundingAddedEvent)
        assert events[3].amounts_added == (100, 80)

    def test_addresses_are_lowercased(self) -> None:
        req = EventBatchRequest.model_validate({"events": [
            {
                "event_type": "redemption", "user": USER, "market": MARKET,
                "condition_id": CONDITION, "outcome_indices": [0],
            },
        ]})
        event = req.to_domain()[0]
        assert event.user == USER.lower()
        assert event.condition_id == CONDITION.lower()

    def test_amounts_beyond_64_bits_accepted(self) -> None:
        big = 2**255
        req = EventBatchRequest.model_validate({"events": [
            {"event_type": "merge", "user": USER, "market": MARKET, "amount": str(big)},
        ]})
        assert req.to_domain()[0].amount == big

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventBatchRequest.model_validate({"events": [
                {"event_type": "split", "user": USER, "market": MARKET, "amount": -1},
            ]})

    def test_bad_address_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventBatchRequest.model_validate({"events": [
                {"event_type": "split", "user": "0x1234", "market": MARKET, "amount": 1},
            ]})

    def test_unknown_event_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventBatchRequest.model_validate({"events": [
                {"event_type": "transfer", "user": USER},
            ]})

    def test_empty_batch_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventBatchRequest.model_validate({"events": []})

    def test_empty_funding_vector_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventBatchRequest.model_validate({"events": [
                {
                    "event_type": "funding_removed", "funder": USER, "market": MARKET,
                    "amounts_removed": [], "shares_burnt": 1,
                },
            ]})


class TestResponses:
    def test_position_amounts_render_as_strings(self) -> None:
        pos = MarketPosition(
            user=USER.lower(), market=MARKET, outcome_index=0,
            quantity_sold=2**70, net_quantity=-(2**70),
        )
        resp = PositionResponse.from_domain(pos)
        assert resp.net_quantity == str(-(2**70))
        assert resp.quantity_bought == "0"
        assert resp.id == pos.id

    def test_batch_response_counts(self) -> None:
        results = [
            EventResult(EventType.TRADE, EventStatus.SKIPPED, error_code=6001, reason="missing"),
            EventResult(
                EventType.SPLIT, EventStatus.APPLIED,
                positions=[MarketPosition(USER, MARKET, 0), MarketPosition(USER, MARKET, 1)],
            ),
        ]
        diagnostics = [Diagnostic(kind=DiagnosticKind.LOOKUP_FAILURE, message="missing", code=6001)]

        resp = EventBatchResponse.from_results(results, diagnostics)

        assert resp.applied == 1
        assert resp.skipped == 1
        assert resp.results[0].error_code == 6001
        assert resp.results[1].positions_updated == 2
        assert resp.results[1].index == 1
        assert resp.diagnostics[0].kind == "LOOKUP_FAILURE"

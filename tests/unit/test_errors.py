"""Tests for pm_common.errors and pm_common.response."""

from src.pm_common.enums import DiagnosticKind
from src.pm_common.errors import (
    AppError,
    BatchTooLargeError,
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
from src.pm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=6003, message="too big", http_status=413)
        assert err.http_status == 413

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="test"), Exception)


class TestRejections:
    def test_transaction_not_found_is_lookup_failure(self) -> None:
        err = TransactionNotFoundError("0xabc")
        assert isinstance(err, EventRejectedError)
        assert err.kind == DiagnosticKind.LOOKUP_FAILURE
        assert err.code == 6001
        assert err.reference == "0xabc"
        assert "0xabc" in err.message

    def test_market_and_condition_lookups(self) -> None:
        assert MarketNotFoundError("0xm").code == 3001
        cond = ConditionNotFoundError("0xc", "0xm")
        assert cond.code == 3003
        assert cond.market == "0xm"
        assert cond.kind == DiagnosticKind.LOOKUP_FAILURE

    def test_unresolved_condition(self) -> None:
        err = ConditionNotResolvedError("0xc")
        assert err.code == 3004
        assert err.kind == DiagnosticKind.LOOKUP_FAILURE
        assert "has not resolved" in err.message

    def test_preconditions(self) -> None:
        multi = MultiConditionMarketError("0xm", "2 conditions")
        assert multi.code == 3005
        assert multi.kind == DiagnosticKind.PRECONDITION_FAILURE
        slots = OutcomeSlotMismatchError("0xm", 2, 3)
        assert slots.code == 3006
        assert "2" in slots.message and "3" in slots.message
        invalid = InvalidEventError("bad vector", user="0xu", market="0xm")
        assert invalid.code == 6002
        assert invalid.user == "0xu"
        assert invalid.http_status == 422

    def test_invalid_payout(self) -> None:
        err = InvalidPayoutError("0xc", "0xm", "payout denominator 0")
        assert err.code == 3007
        assert err.kind == DiagnosticKind.PRECONDITION_FAILURE
        assert err.reference == "0xc"
        assert err.market == "0xm"

    def test_batch_too_large(self) -> None:
        err = BatchTooLargeError(size=501, limit=500)
        assert err.code == 6003
        assert err.http_status == 413
        assert not isinstance(err, EventRejectedError)


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"applied": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"applied": 1}
        assert resp.request_id.startswith("req_")
        assert resp.timestamp

    def test_error_response_keeps_request_id(self) -> None:
        resp = error_response(3001, "Market not found", request_id="req_fromheader")
        assert resp.code == 3001
        assert resp.data is None
        assert resp.request_id == "req_fromheader"

    def test_default_values(self) -> None:
        resp = ApiResponse()
        assert resp.code == 0
        assert resp.data is None

"""
Tests for the negotiation state machine and tagged results.
"""
import httpx
import pytest

from silverback_x402.engine.exceptions import (
    ConfigurationError,
    InvalidTransition,
    MalformedRequirementsError,
    NetworkError,
    PaymentNotConfiguredError,
    PaymentRejectedError,
    RequestFailedError,
    UnsupportedNetworkError,
    X402ClientError,
)
from silverback_x402.engine.results import (
    FailureKind,
    NegotiationState,
    NegotiationTracker,
    PaymentFailure,
    PaymentSuccess,
    RequestAttempt,
)


class TestTracker:

    def test_paid_path(self):
        tracker = NegotiationTracker()
        for state in (
            NegotiationState.SENT_FIRST,
            NegotiationState.PAYMENT_REQUIRED,
            NegotiationState.AUTHORIZING,
            NegotiationState.SENT_PAID,
            NegotiationState.SUCCESS,
        ):
            tracker.advance(state)
        assert tracker.state.is_terminal
        assert tracker.history[0] is NegotiationState.IDLE

    def test_cannot_skip_payment_required(self):
        tracker = NegotiationTracker()
        tracker.advance(NegotiationState.SENT_FIRST)
        with pytest.raises(InvalidTransition):
            tracker.advance(NegotiationState.AUTHORIZING)

    def test_no_second_paid_attempt(self):
        tracker = NegotiationTracker()
        for state in (
            NegotiationState.SENT_FIRST,
            NegotiationState.PAYMENT_REQUIRED,
            NegotiationState.AUTHORIZING,
            NegotiationState.SENT_PAID,
        ):
            tracker.advance(state)
        with pytest.raises(InvalidTransition):
            tracker.advance(NegotiationState.PAYMENT_REQUIRED)

    @pytest.mark.parametrize("terminal", [NegotiationState.SUCCESS, NegotiationState.FAILED])
    def test_terminal_states_are_final(self, terminal):
        tracker = NegotiationTracker()
        tracker.advance(NegotiationState.SENT_FIRST)
        tracker.advance(terminal)
        with pytest.raises(InvalidTransition):
            tracker.advance(NegotiationState.SENT_FIRST)


class TestFailureKind:

    @pytest.mark.parametrize("error, kind", [
        (PaymentNotConfiguredError("x"), FailureKind.PAYMENT_NOT_CONFIGURED),
        (ConfigurationError("x"), FailureKind.CONFIGURATION),
        (MalformedRequirementsError("x"), FailureKind.MALFORMED_REQUIREMENTS),
        (UnsupportedNetworkError("x"), FailureKind.UNSUPPORTED_NETWORK),
        (PaymentRejectedError("x"), FailureKind.PAYMENT_REJECTED),
        (RequestFailedError(500, {"error": "boom"}), FailureKind.REQUEST_FAILED),
        (NetworkError("x", attempt=1), FailureKind.NETWORK),
    ])
    def test_mapping(self, error, kind):
        assert FailureKind.for_error(error) is kind

    def test_unmapped_error(self):
        with pytest.raises(TypeError):
            FailureKind.for_error(X402ClientError("x"))


class TestResults:

    def test_success_unwrap(self):
        response = httpx.Response(200, json={"ok": True})
        result = PaymentSuccess(response=response, attempts=[RequestAttempt("GET", "https://x/y")])
        assert result.ok
        assert result.unwrap() is response
        assert result.json() == {"ok": True}
        assert result.status_code == 200

    def test_failure_unwrap_raises_carried_error(self):
        error = RequestFailedError(404, {"error": "not found"})
        result = PaymentFailure.from_error(error, [RequestAttempt("GET", "https://x/y")], httpx.Response(404))
        assert not result.ok
        assert result.kind is FailureKind.REQUEST_FAILED
        assert result.status_code == 404
        with pytest.raises(RequestFailedError) as info:
            result.unwrap()
        assert info.value.payload == {"error": "not found"}

    def test_attempt_number_bounded(self):
        with pytest.raises(ValueError):
            RequestAttempt("GET", "https://x/y", attempt=3)

import threading
import time

import pytest

from akeditz.infra.errors import ClientError, NetworkError, ServerError, UnauthorizedError
from akeditz.models.payments import PaymentIntent
from akeditz.payments import repository
from akeditz.payments.intent import IntentState, PaymentInitializationError, PaymentIntentInitializer, user_message
from akeditz.payments.pricing import InvalidPriceError

INTENT = PaymentIntent(client_secret="pi_1_secret_x")

def _script(monkeypatch, outcomes):
    """create_payment_intent renvoie/lève successivement les éléments de outcomes."""
    calls = []

    def fake_create(client, *, project_id, amount, currency):
        calls.append({"project_id": project_id, "amount": amount, "currency": currency})
        outcome = outcomes[min(len(calls), len(outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(repository, "create_payment_intent", fake_create)
    return calls

def test_success_first_attempt(monkeypatch, stub_client):
    calls = _script(monkeypatch, [INTENT])
    init = PaymentIntentInitializer(stub_client, retry_delay=0)
    intent = init.initialize("p1", "49.99", "usd")
    assert intent.client_secret == "pi_1_secret_x"
    assert init.client_secret == "pi_1_secret_x"
    assert init.state == IntentState.READY
    assert calls == [{"project_id": "p1", "amount": 49.99, "currency": "usd"}]

def test_invalid_price_never_calls_backend(monkeypatch, stub_client):
    calls = _script(monkeypatch, [INTENT])
    init = PaymentIntentInitializer(stub_client, retry_delay=0)
    with pytest.raises(InvalidPriceError):
        init.initialize("p1", "abc")
    assert calls == []

def test_recovers_after_transient_failures(monkeypatch, stub_client):
    retries = []
    calls = _script(monkeypatch, [ServerError("boom", status=500), NetworkError(), INTENT])
    init = PaymentIntentInitializer(stub_client, retry_delay=0, on_retry=lambda n, e: retries.append(n))
    assert init.initialize("p1", 10).client_secret == "pi_1_secret_x"
    assert len(calls) == 3
    assert retries == [1, 2]
    assert init.attempts == 3

def test_three_retries_then_failure(monkeypatch, stub_client):
    calls = _script(monkeypatch, [ServerError("Stripe is unavailable", status=500)])
    init = PaymentIntentInitializer(stub_client, retry_delay=0)
    with pytest.raises(PaymentInitializationError) as exc:
        init.initialize("p1", 10)
    assert len(calls) == 4
    assert exc.value.attempts == 4
    assert exc.value.kind == "server"
    assert exc.value.message == "Payment service is temporarily unavailable. Please try again later."
    assert init.state == IntentState.FAILED
    assert init.error is exc.value
    assert init.can_retry

def test_fixed_delay_between_attempts(monkeypatch, stub_client):
    _script(monkeypatch, [NetworkError()])
    init = PaymentIntentInitializer(stub_client, retry_delay=2.0)
    waits = []

    class FakeEvent:
        def clear(self):
            pass

        def set(self):
            pass

        def wait(self, timeout):
            waits.append(timeout)
            return False

    init._cancelled = FakeEvent()
    with pytest.raises(PaymentInitializationError) as exc:
        init.initialize("p1", 10)
    assert waits == [2.0, 2.0, 2.0]
    assert exc.value.message == "Network error. Please check your connection and try again."

def test_unauthorized_is_not_retried(monkeypatch, stub_client):
    calls = _script(monkeypatch, [UnauthorizedError("Token is not valid", status=401)])
    init = PaymentIntentInitializer(stub_client, retry_delay=0)
    with pytest.raises(PaymentInitializationError) as exc:
        init.initialize("p1", 10)
    assert len(calls) == 1
    assert exc.value.kind == "unauthorized"
    assert not init.can_retry

def test_manual_retry_restarts_sequence(monkeypatch, stub_client):
    outcomes = [ServerError("down", status=503)] * 4 + [INTENT]
    calls = _script(monkeypatch, outcomes)
    init = PaymentIntentInitializer(stub_client, retry_delay=0)
    with pytest.raises(PaymentInitializationError):
        init.initialize("p1", "49.99")
    assert init.retry().client_secret == "pi_1_secret_x"
    assert len(calls) == 5
    assert calls[-1]["amount"] == 49.99
    assert init.state == IntentState.READY

def test_retry_before_initialize():
    with pytest.raises(RuntimeError):
        PaymentIntentInitializer(object()).retry()

def test_cancel_interrupts_retry_wait(monkeypatch, stub_client):
    calls = _script(monkeypatch, [ServerError("down", status=500)])
    init = PaymentIntentInitializer(stub_client, retry_delay=30)
    errors = []

    def run():
        try:
            init.initialize("p1", 10)
        except PaymentInitializationError as e:
            errors.append(e)

    t = threading.Thread(target=run)
    t.start()
    while not calls:
        time.sleep(0.01)
    init.cancel()
    t.join(timeout=5)
    assert not t.is_alive()
    assert errors[0].kind == "cancelled"
    assert init.state == IntentState.CANCELLED
    assert len(calls) == 1

def test_user_message_keeps_validation_message():
    assert user_message(ClientError("Project not found", status=404)) == "Project not found"

import pytest

from akeditz.infra.errors import ServerError
from akeditz.models.payments import Payment
from akeditz.payments import repository
from akeditz.payments.card import (
    GENERIC_PAYMENT_ERROR,
    CardPaymentFlow,
    CardState,
    TermsNotAcceptedError,
    sdk_error_message,
)
from akeditz.payments.stripe_client import ConfirmationResult

SECRET = "pi_123_secret_abc"

class FakeConfirmer:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def confirm(self, client_secret, payment_method, return_url=None):
        self.calls.append((client_secret, payment_method, return_url))
        return self.results.pop(0)

    def retrieve_status(self, client_secret):
        return self.results.pop(0)

@pytest.fixture
def confirmed(monkeypatch):
    calls = []

    def fake_confirm_payment(client, payment_intent_id):
        calls.append(payment_intent_id)
        return Payment.model_validate({"_id": "pay_1", "status": "succeeded", "paymentIntentId": payment_intent_id})

    monkeypatch.setattr(repository, "confirm_payment", fake_confirm_payment)
    return calls

def test_sdk_error_message():
    assert sdk_error_message("card_error", "Your card was declined.") == "Your card was declined."
    assert sdk_error_message("validation_error", "Incomplete card number") == "Incomplete card number"
    assert sdk_error_message("api_error", "timeout") == "Payment failed: timeout"
    assert sdk_error_message("api_error", None) == GENERIC_PAYMENT_ERROR

def test_client_secret_required(stub_client):
    with pytest.raises(ValueError):
        CardPaymentFlow(stub_client, FakeConfirmer(), "")

def test_terms_must_be_accepted(stub_client, confirmed):
    confirmer = FakeConfirmer(ConfirmationResult(status="succeeded", payment_intent_id="pi_123"))
    flow = CardPaymentFlow(stub_client, confirmer, SECRET)
    assert not flow.can_submit
    with pytest.raises(TermsNotAcceptedError) as exc:
        flow.submit("pm_card_visa")
    assert exc.value.message == "Please accept the terms and conditions to continue"
    assert confirmer.calls == []
    assert confirmed == []

def test_successful_payment_notifies_backend(stub_client, confirmed):
    successes = []
    confirmer = FakeConfirmer(ConfirmationResult(status="succeeded", payment_intent_id="pi_123"))
    flow = CardPaymentFlow(stub_client, confirmer, SECRET, return_url="https://shop/return", on_success=successes.append)
    flow.accept_terms()
    assert flow.submit("pm_card_visa") == CardState.SUCCEEDED
    assert confirmer.calls == [(SECRET, "pm_card_visa", "https://shop/return")]
    assert confirmed == ["pi_123"]
    assert successes[0].id == "pay_1"
    assert flow.payment.payment_intent_id == "pi_123"

def test_card_error_is_terminal_for_attempt(stub_client, confirmed):
    confirmer = FakeConfirmer(
        ConfirmationResult(payment_intent_id="pi_123", error_type="card_error", error_message="Your card was declined."),
        ConfirmationResult(status="succeeded", payment_intent_id="pi_123"),
    )
    flow = CardPaymentFlow(stub_client, confirmer, SECRET)
    flow.accept_terms()
    assert flow.submit("pm_card_chargeDeclined") == CardState.FAILED
    assert flow.error == "Your card was declined."
    assert confirmed == []
    # nouvelle tentative manuelle possible
    assert flow.can_submit
    assert flow.submit("pm_card_visa") == CardState.SUCCEEDED
    assert flow.error is None

def test_requires_action_then_redirect_return(stub_client, confirmed):
    confirmer = FakeConfirmer(
        ConfirmationResult(status="requires_action", payment_intent_id="pi_123", redirect_url="https://3ds"),
        ConfirmationResult(status="succeeded", payment_intent_id="pi_123"),
    )
    flow = CardPaymentFlow(stub_client, confirmer, SECRET)
    flow.accept_terms()
    assert flow.submit("pm_card_threeDSecure2Required") == CardState.CONFIRMING
    assert flow.redirect_url == "https://3ds"
    assert not flow.can_submit
    with pytest.raises(RuntimeError):
        flow.submit("pm_card_visa")
    assert flow.complete_redirect() == CardState.SUCCEEDED
    assert confirmed == ["pi_123"]

def test_complete_redirect_without_pending_action(stub_client):
    flow = CardPaymentFlow(stub_client, FakeConfirmer(), SECRET)
    with pytest.raises(RuntimeError):
        flow.complete_redirect()

def test_unexpected_status_fails(stub_client, confirmed):
    flow = CardPaymentFlow(stub_client, FakeConfirmer(ConfirmationResult(status="canceled")), SECRET)
    flow.accept_terms()
    assert flow.submit("pm") == CardState.FAILED
    assert flow.error == "Payment status: canceled"

def test_backend_confirmation_failure(monkeypatch, stub_client):
    def boom(client, payment_intent_id):
        raise ServerError("Internal server error", status=500)

    monkeypatch.setattr(repository, "confirm_payment", boom)
    successes = []
    flow = CardPaymentFlow(
        stub_client,
        FakeConfirmer(ConfirmationResult(status="succeeded")),
        SECRET,
        on_success=successes.append,
    )
    flow.accept_terms()
    assert flow.submit("pm_card_visa") == CardState.FAILED
    assert flow.error == "Internal server error"
    assert successes == []

def test_processing_uses_intent_id_from_secret(stub_client, confirmed):
    flow = CardPaymentFlow(stub_client, FakeConfirmer(ConfirmationResult(status="processing")), SECRET)
    flow.accept_terms()
    flow.submit("pm")
    assert confirmed == ["pi_123"]

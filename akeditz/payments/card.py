"""
Flux de paiement carte: idle -> confirming -> (succeeded | failed).
La confirmation est déléguée au SDK (CardConfirmer); le backend est notifié
(confirm-payment) avant de considérer l'achat comme terminé.
"""
from enum import Enum
from typing import Any, Callable, Optional
import logging

from akeditz.infra.errors import ApiError
from akeditz.models.payments import Payment
from . import repository
from .stripe_client import ConfirmationResult, intent_id_from_secret

logger = logging.getLogger(__name__)

GENERIC_PAYMENT_ERROR = "An unexpected error occurred. Please try again."


class CardState(str, Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TermsNotAcceptedError(Exception):
    def __init__(self, message: str = "Please accept the terms and conditions to continue"):
        super().__init__(message)
        self.message = message


def sdk_error_message(error_type: Optional[str], message: Optional[str]) -> str:
    """
    Message utilisateur pour une erreur SDK.
    - card_error / validation_error: message du SDK tel quel
    - autres: message générique (suffixé du détail si présent)
    """
    if error_type in ("card_error", "validation_error") and message:
        return message
    if message:
        return f"Payment failed: {message}"
    return GENERIC_PAYMENT_ERROR


class CardPaymentFlow:
    def __init__(
        self,
        client,
        confirmer,
        client_secret: str,
        *,
        return_url: Optional[str] = None,
        on_success: Optional[Callable[[Payment], None]] = None,
    ):
        if not client_secret:
            raise ValueError("client_secret is required to mount the card flow")
        self.client = client
        self.confirmer = confirmer
        self.client_secret = client_secret
        self.return_url = return_url
        self.on_success = on_success
        self.state = CardState.IDLE
        self.terms_accepted = False
        self.error: Optional[str] = None
        self.redirect_url: Optional[str] = None
        self.payment: Optional[Payment] = None

    def accept_terms(self, accepted: bool = True) -> None:
        self.terms_accepted = accepted

    @property
    def can_submit(self) -> bool:
        return self.terms_accepted and self.state in (CardState.IDLE, CardState.FAILED)

    def submit(self, payment_method: Any) -> CardState:
        """
        Confirme le paiement avec le moyen fourni (ex: id "pm_...").
        - TermsNotAcceptedError si les CGV ne sont pas acceptées
        - Les erreurs SDK sont terminales pour cette tentative (pas de retry auto)
        """
        if not self.terms_accepted:
            raise TermsNotAcceptedError()
        if self.state not in (CardState.IDLE, CardState.FAILED):
            raise RuntimeError(f"Cannot submit while {self.state.value}")

        self.state = CardState.CONFIRMING
        self.error = None
        self.redirect_url = None
        result = self.confirmer.confirm(self.client_secret, payment_method, return_url=self.return_url)
        return self._handle_result(result)

    def complete_redirect(self) -> CardState:
        """Reprend le flux après le retour de la redirection 3-D Secure."""
        if self.state != CardState.CONFIRMING:
            raise RuntimeError("No redirect is pending")
        return self._handle_result(self.confirmer.retrieve_status(self.client_secret))

    def _handle_result(self, result: ConfirmationResult) -> CardState:
        if result.failed:
            return self._fail(sdk_error_message(result.error_type, result.error_message))
        if result.status == "requires_action":
            self.redirect_url = result.redirect_url
            logger.info("Card payment requires action (3-D Secure) intent=%s", result.payment_intent_id)
            return self.state
        if result.status not in ("succeeded", "processing"):
            return self._fail(f"Payment status: {result.status}")
        return self._finalize(result.payment_intent_id or intent_id_from_secret(self.client_secret))

    def _finalize(self, payment_intent_id: str) -> CardState:
        try:
            self.payment = repository.confirm_payment(self.client, payment_intent_id)
        except ApiError as e:
            logger.error("confirm-payment failed intent=%s: %s", payment_intent_id, e.message)
            return self._fail(e.message)
        self.state = CardState.SUCCEEDED
        if self.on_success:
            self.on_success(self.payment)
        return self.state

    def _fail(self, message: str) -> CardState:
        self.state = CardState.FAILED
        self.error = message
        return self.state

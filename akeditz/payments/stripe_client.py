"""
Adaptateur Stripe: confirmation carte côté client (clé publique + client_secret).
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

import stripe

from akeditz.config import STRIPE_PUBLISHABLE_KEY

logger = logging.getLogger(__name__)

# module akeditz.payments.stripe_client
@dataclass
class ConfirmationResult:
    """
    Résultat d'une confirmation SDK.
    - status: statut Stripe de l'intent ("succeeded", "requires_action", ...)
    - error_type: "card_error" | "validation_error" | autre, si le SDK a échoué
    - redirect_url: URL 3-D Secure à suivre quand status == "requires_action"
    """
    status: Optional[str] = None
    payment_intent_id: Optional[str] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    redirect_url: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error_type is not None


def intent_id_from_secret(client_secret: str) -> str:
    return (client_secret or "").split("_secret_", 1)[0]


class StripeCardConfirmer:
    """
    Confirme un PaymentIntent avec la clé publique et le client_secret,
    comme le Payment Element du navigateur (aucune clé secrète côté client).
    """

    def __init__(self, publishable_key: str = STRIPE_PUBLISHABLE_KEY):
        if not publishable_key:
            raise RuntimeError("STRIPE_PUBLISHABLE_KEY manquant")
        self.publishable_key = publishable_key

    def confirm(
        self,
        client_secret: str,
        payment_method: Any,
        return_url: Optional[str] = None,
    ) -> ConfirmationResult:
        intent_id = intent_id_from_secret(client_secret)
        params: Dict[str, Any] = {"client_secret": client_secret, "payment_method": payment_method}
        if return_url:
            params["return_url"] = return_url
        try:
            intent = stripe.PaymentIntent.confirm(intent_id, api_key=self.publishable_key, **params)
        except stripe.CardError as e:
            return ConfirmationResult(payment_intent_id=intent_id, error_type="card_error", error_message=e.user_message or str(e))
        except stripe.InvalidRequestError as e:
            return ConfirmationResult(payment_intent_id=intent_id, error_type="validation_error", error_message=e.user_message or str(e))
        except stripe.StripeError as e:
            logger.exception("stripe_client.confirm failed intent=%s", intent_id)
            return ConfirmationResult(payment_intent_id=intent_id, error_type="api_error", error_message=e.user_message or str(e))
        return _result_from_intent(intent, intent_id)

    def retrieve_status(self, client_secret: str) -> ConfirmationResult:
        """Relit l'intent après un retour de redirection 3-D Secure."""
        intent_id = intent_id_from_secret(client_secret)
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.publishable_key, client_secret=client_secret)
        except stripe.StripeError as e:
            logger.exception("stripe_client.retrieve_status failed intent=%s", intent_id)
            return ConfirmationResult(payment_intent_id=intent_id, error_type="api_error", error_message=e.user_message or str(e))
        return _result_from_intent(intent, intent_id)


def _result_from_intent(intent: Any, intent_id: str) -> ConfirmationResult:
    if isinstance(intent, dict):
        data = intent
    else:
        data = intent.to_dict() if hasattr(intent, "to_dict") else dict(intent)
    status = data.get("status")
    redirect_url = None
    next_action = data.get("next_action") or {}
    if status == "requires_action":
        redirect_url = ((next_action.get("redirect_to_url") or {}).get("url"))
    last_error = data.get("last_payment_error") or {}
    if status == "requires_payment_method" and last_error:
        return ConfirmationResult(
            status=status,
            payment_intent_id=data.get("id") or intent_id,
            error_type=last_error.get("type") or "card_error",
            error_message=last_error.get("message") or "Your payment was not successful, please try again.",
        )
    return ConfirmationResult(status=status, payment_intent_id=data.get("id") or intent_id, redirect_url=redirect_url)

"""
Module 'payments' (feature-first): point d'entrée public.
Réunit validation du prix, appels REST, adaptateur Stripe, flux carte/QR et orchestrateur.
"""

from .pricing import InvalidPriceError, parse_price
from .stripe_client import ConfirmationResult, StripeCardConfirmer
from .intent import IntentState, PaymentInitializationError, PaymentIntentInitializer
from .card import CardPaymentFlow, CardState, TermsNotAcceptedError, sdk_error_message
from .qr import QRPaymentFlow, QRStatus, normalize_status
from .checkout import CheckoutError, CheckoutOrchestrator, CheckoutView, PaymentMethod

__all__ = [
    # prix
    "InvalidPriceError",
    "parse_price",
    # stripe
    "ConfirmationResult",
    "StripeCardConfirmer",
    # intent
    "IntentState",
    "PaymentInitializationError",
    "PaymentIntentInitializer",
    # flux
    "CardPaymentFlow",
    "CardState",
    "TermsNotAcceptedError",
    "sdk_error_message",
    "QRPaymentFlow",
    "QRStatus",
    "normalize_status",
    # orchestrateur
    "CheckoutError",
    "CheckoutOrchestrator",
    "CheckoutView",
    "PaymentMethod",
]

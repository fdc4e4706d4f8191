"""
Initialisation du PaymentIntent (préalable au montage du flux carte).
- Valide le montant avant tout appel réseau.
- Retries automatiques bornés (délai fixe), puis retry manuel.
- L'attente entre deux essais est annulable (teardown du checkout).
"""
from enum import Enum
from typing import Callable, Optional
import logging
import threading

from akeditz.config import DEFAULT_CURRENCY, INTENT_MAX_RETRIES, INTENT_RETRY_DELAY_SECONDS
from akeditz.infra.errors import ApiError, UnauthorizedError
from akeditz.models.payments import PaymentIntent
from . import repository
from .pricing import parse_price

logger = logging.getLogger(__name__)

_KIND_MESSAGES = {
    "network": "Network error. Please check your connection and try again.",
    "server": "Payment service is temporarily unavailable. Please try again later.",
}


class IntentState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PaymentInitializationError(Exception):
    """
    Échec définitif de l'initialisation (retries épuisés ou erreur non rejouable).
    - kind: "network" | "server" | "validation" | "unauthorized" | "cancelled"
    - retryable: True si un retry manuel a du sens
    """

    def __init__(self, message: str, kind: str, attempts: int = 0, retryable: bool = True):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.attempts = attempts
        self.retryable = retryable


def classify_error(error: ApiError) -> str:
    return error.kind if error.kind in ("network", "server", "unauthorized") else "validation"


def user_message(error: ApiError) -> str:
    return _KIND_MESSAGES.get(classify_error(error), error.message)


class PaymentIntentInitializer:
    def __init__(
        self,
        client,
        *,
        max_retries: int = INTENT_MAX_RETRIES,
        retry_delay: float = INTENT_RETRY_DELAY_SECONDS,
        on_retry: Optional[Callable[[int, ApiError], None]] = None,
    ):
        self.client = client
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.on_retry = on_retry
        self.state = IntentState.IDLE
        self.intent: Optional[PaymentIntent] = None
        self.error: Optional[PaymentInitializationError] = None
        self.attempts = 0
        self._cancelled = threading.Event()
        self._last_request = None

    @property
    def client_secret(self) -> Optional[str]:
        return self.intent.client_secret if self.intent else None

    @property
    def can_retry(self) -> bool:
        return self.state == IntentState.FAILED and self._last_request is not None and bool(self.error and self.error.retryable)

    def initialize(self, project_id: str, amount, currency: str = DEFAULT_CURRENCY) -> PaymentIntent:
        """
        Crée l'intent pour (project_id, amount, currency).
        - InvalidPriceError immédiate si amount n'est pas un nombre > 0 (aucun appel)
        - Jusqu'à max_retries nouveaux essais espacés de retry_delay
        - PaymentInitializationError après épuisement (self.error renseigné)
        """
        price = parse_price(amount)
        self._last_request = (project_id, price, currency)
        self._cancelled.clear()
        self.state = IntentState.LOADING
        self.error = None
        self.intent = None
        self.attempts = 0

        while True:
            self.attempts += 1
            try:
                intent = repository.create_payment_intent(
                    self.client, project_id=project_id, amount=price, currency=currency
                )
            except ApiError as e:
                kind = classify_error(e)
                retries_done = self.attempts - 1
                if isinstance(e, UnauthorizedError) or retries_done >= self.max_retries:
                    return self._fail(e, kind)
                logger.warning(
                    "create_payment_intent failed (attempt %s/%s, kind=%s): %s",
                    self.attempts, self.max_retries + 1, kind, e.message,
                )
                if self.on_retry:
                    self.on_retry(retries_done + 1, e)
                if self._cancelled.wait(self.retry_delay):
                    self.state = IntentState.CANCELLED
                    raise PaymentInitializationError(
                        "Payment initialization cancelled", "cancelled", self.attempts, retryable=False
                    )
                continue
            self.intent = intent
            self.state = IntentState.READY
            return intent

    def _fail(self, error: ApiError, kind: str):
        self.state = IntentState.FAILED
        self.error = PaymentInitializationError(
            user_message(error),
            kind,
            self.attempts,
            retryable=kind != "unauthorized",
        )
        logger.error("Payment initialization failed after %s attempt(s): %s", self.attempts, error.message)
        raise self.error from error

    def retry(self) -> PaymentIntent:
        """Retry manuel: rejoue la séquence complète (compteur de retries remis à zéro)."""
        if self._last_request is None:
            raise RuntimeError("initialize() must be called before retry()")
        project_id, price, currency = self._last_request
        return self.initialize(project_id, price, currency)

    def cancel(self) -> None:
        """Interrompt une attente de retry en cours (aucun nouvel essai ne part)."""
        self._cancelled.set()

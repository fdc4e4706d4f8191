"""
Orchestrateur du checkout: garde-fous projet/prix, choix du flux (carte ou QR),
vue de succès puis redirection différée vers le dashboard.
"""
from enum import Enum
from typing import Any, Callable, Optional
import logging
import threading

from akeditz.config import (
    DASHBOARD_PATH,
    DEFAULT_CURRENCY,
    LOGIN_PATH,
    QR_EXPIRY_SECONDS,
    QR_POLL_INTERVAL_SECONDS,
    SUCCESS_REDIRECT_DELAY_SECONDS,
)
from akeditz.infra.errors import ApiError, is_not_found
from akeditz.models.projects import Project
from akeditz.projects import repository as projects_repository
from .card import CardPaymentFlow
from .intent import PaymentInitializationError, PaymentIntentInitializer
from .pricing import InvalidPriceError, parse_price
from .qr import QRPaymentFlow, QRStatus
from .stripe_client import StripeCardConfirmer

logger = logging.getLogger(__name__)


class PaymentMethod(str, Enum):
    CARD = "card"
    QR = "qr"


class CheckoutView(str, Enum):
    LOADING = "loading"
    PAYMENT = "payment"
    SUCCESS = "success"
    ERROR = "error"


class CheckoutError(Exception):
    def __init__(self, title: str, message: str):
        super().__init__(f"{title}: {message}")
        self.title = title
        self.message = message


def _default_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def _cancel(timer: Any) -> None:
    if timer is not None and hasattr(timer, "cancel"):
        timer.cancel()


class CheckoutOrchestrator:
    """
    Un seul flux de paiement monté à la fois.
    - load(): récupère le projet et valide actif + prix (aucun flux initialisé avant)
    - select_method(): démonte le flux courant et monte le flux choisi
    - close(): teardown complet (polling, attente de retry, timer de redirection)
    """

    def __init__(
        self,
        client,
        project_id: str,
        *,
        confirmer=None,
        navigate: Optional[Callable[[str], None]] = None,
        on_success: Optional[Callable[[Any], None]] = None,
        currency: str = DEFAULT_CURRENCY,
        initializer: Optional[PaymentIntentInitializer] = None,
        success_redirect_delay: float = SUCCESS_REDIRECT_DELAY_SECONDS,
        qr_poll_interval: float = QR_POLL_INTERVAL_SECONDS,
        qr_expires_after: float = QR_EXPIRY_SECONDS,
        scheduler: Callable[[float, Callable[[], None]], Any] = _default_scheduler,
        return_url: Optional[str] = None,
    ):
        self.client = client
        self.project_id = project_id
        self.confirmer = confirmer
        self.navigate = navigate or (lambda path: logger.info("navigate -> %s", path))
        self.on_success = on_success
        self.currency = currency
        self.initializer = initializer or PaymentIntentInitializer(client)
        self.success_redirect_delay = success_redirect_delay
        self.qr_poll_interval = qr_poll_interval
        self.qr_expires_after = qr_expires_after
        self.scheduler = scheduler
        self.return_url = return_url

        self.view = CheckoutView.LOADING
        self.error: Optional[CheckoutError] = None
        self.project: Optional[Project] = None
        self.amount: Optional[float] = None
        self.method: Optional[PaymentMethod] = None
        self.card_flow: Optional[CardPaymentFlow] = None
        self.qr_flow: Optional[QRPaymentFlow] = None
        self.result: Any = None
        self._success_lock = threading.Lock()
        self._succeeded = False
        self._closed = False
        self._redirect_timer: Any = None

    # --- Chargement et garde-fous ---

    def load(self) -> CheckoutView:
        try:
            project = projects_repository.get_project(self.client, self.project_id)
        except ApiError as e:
            if is_not_found(e):
                return self._error("Project Not Found", "The project you are trying to purchase does not exist.")
            return self._error("Checkout Error", e.message)
        return self.prepare(project)

    def prepare(self, project: Optional[Project]) -> CheckoutView:
        """Valide un projet déjà chargé; aucune requête réseau."""
        if project is None or not project.id:
            return self._error("Project Not Found", "The project you are trying to purchase does not exist.")
        if not project.is_active:
            return self._error("Project Unavailable", "This project is not available for purchase.")
        try:
            self.amount = parse_price(project.price)
        except InvalidPriceError as e:
            return self._error("Pricing Error", e.message)
        self.project = project
        self.view = CheckoutView.PAYMENT
        return self.view

    def _error(self, title: str, message: str) -> CheckoutView:
        logger.warning("checkout %s: %s (%s)", self.project_id, title, message)
        self.error = CheckoutError(title, message)
        self.view = CheckoutView.ERROR
        return self.view

    # --- Choix du flux ---

    def select_method(self, method: PaymentMethod, *, background: bool = True):
        """
        Monte le flux choisi (le précédent est démonté).
        - Utilisateur anonyme: redirection vers la page de login, aucun flux
        - CARD: intent d'abord (client_secret), puis flux carte
        - QR: initialisation + polling (background=False: polling bloquant)
        """
        if self.view != CheckoutView.PAYMENT:
            raise RuntimeError(f"Cannot select a payment method in view {self.view.value}")
        if not self.client.session.token:
            self.navigate(LOGIN_PATH)
            return None
        method = PaymentMethod(method)
        self._teardown_flow()
        self.method = method
        if method == PaymentMethod.CARD:
            return self._mount_card()
        return self._mount_qr(background)

    def _mount_card(self) -> Optional[CardPaymentFlow]:
        if self.confirmer is None:
            self.confirmer = StripeCardConfirmer()
        try:
            intent = self.initializer.initialize(self.project.id, self.amount, self.currency)
        except PaymentInitializationError as e:
            logger.error("card flow not mounted: %s", e.message)
            return None
        self.card_flow = CardPaymentFlow(
            self.client,
            self.confirmer,
            intent.client_secret,
            return_url=self.return_url,
            on_success=self._handle_success,
        )
        return self.card_flow

    def _mount_qr(self, background: bool) -> QRPaymentFlow:
        self.qr_flow = QRPaymentFlow(
            self.client,
            self.project.id,
            self.amount,
            currency=self.currency,
            poll_interval=self.qr_poll_interval,
            expires_after=self.qr_expires_after,
            on_success=self._handle_success,
            on_failure=self._handle_qr_failure,
        )
        try:
            self.qr_flow.start(background=background)
        except ApiError as e:
            logger.error("QR payment not created: %s", e.message)
            self.qr_flow.error = e.message
        return self.qr_flow

    @property
    def payment_error(self) -> Optional[str]:
        """Dernière erreur à afficher dans le formulaire de paiement."""
        if self.card_flow is not None and self.card_flow.error:
            return self.card_flow.error
        if self.qr_flow is not None and self.qr_flow.error:
            return self.qr_flow.error
        if self.initializer.error is not None:
            return self.initializer.error.message
        return None

    def retry_initialization(self) -> Optional[CardPaymentFlow]:
        """Action manuelle "Retry" après épuisement des retries automatiques."""
        if not self.initializer.can_retry:
            return None
        return self._mount_card()

    def refresh_qr(self, *, background: bool = True) -> Optional[QRPaymentFlow]:
        if self.qr_flow is None or self._succeeded:
            return None
        try:
            self.qr_flow.refresh(background=background)
        except ApiError as e:
            logger.error("QR refresh failed: %s", e.message)
            self.qr_flow.error = e.message
        return self.qr_flow

    # --- Succès / échec ---

    def _handle_success(self, result: Any) -> None:
        with self._success_lock:
            # flux démonté (close) pendant la confirmation: plus aucun effet
            if self._succeeded or self._closed:
                return
            self._succeeded = True
        self.result = result
        self.view = CheckoutView.SUCCESS
        logger.info("checkout %s succeeded via %s", self.project_id, self.method.value if self.method else None)
        if self.qr_flow is not None:
            self.qr_flow.stop()
        if self.on_success:
            self.on_success(result)
        timer = self.scheduler(self.success_redirect_delay, self._redirect_to_dashboard)
        with self._success_lock:
            closed = self._closed
            if not closed:
                self._redirect_timer = timer
        if closed:
            _cancel(timer)

    def _redirect_to_dashboard(self) -> None:
        if not self._closed:
            self.navigate(DASHBOARD_PATH)

    def _handle_qr_failure(self, status: QRStatus) -> None:
        if self._closed:
            return
        if self.qr_flow is not None and not self.qr_flow.error:
            self.qr_flow.error = (
                "QR code expired. Please refresh to get a new code."
                if status == QRStatus.EXPIRED
                else "QR payment failed. Please try again."
            )

    # --- Teardown ---

    def _teardown_flow(self) -> None:
        self.initializer.cancel()
        if self.qr_flow is not None:
            self.qr_flow.stop()
        self.qr_flow = None
        self.card_flow = None

    def close(self) -> None:
        """Teardown: plus aucun succès, échec ni redirection ne sont appliqués ensuite."""
        with self._success_lock:
            self._closed = True
            timer, self._redirect_timer = self._redirect_timer, None
        self._teardown_flow()
        _cancel(timer)

    def __enter__(self) -> "CheckoutOrchestrator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

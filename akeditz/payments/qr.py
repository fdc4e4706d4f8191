"""
Flux de paiement QR: created -> processing -> (succeeded | failed), plus
`expired` quand le délai de 15 minutes est dépassé côté client.

Le polling est une tâche annulable (thread + Event):
- start() initialise le paiement puis lance la boucle
- stop() arrête la boucle et ignore toute réponse encore en vol
- refresh() repart de zéro (nouveau payment_id, nouvelle boucle)
"""
from enum import Enum
from typing import Callable, Optional
import logging
import threading
import time

from akeditz.config import DEFAULT_CURRENCY, QR_EXPIRY_SECONDS, QR_POLL_INTERVAL_SECONDS
from akeditz.infra.errors import ApiError, UnauthorizedError
from akeditz.models.payments import QRPaymentSession
from akeditz.utils.qrcode_utils import qr_image_url
from . import repository
from .pricing import parse_price

logger = logging.getLogger(__name__)


class QRStatus(str, Enum):
    CREATED = "created"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    EXPIRED = "expired"


TERMINAL_STATUSES = frozenset({QRStatus.SUCCEEDED, QRStatus.FAILED, QRStatus.EXPIRED})

_STATUS_MAP = {
    "paid": QRStatus.SUCCEEDED,
    "succeeded": QRStatus.SUCCEEDED,
    "failed": QRStatus.FAILED,
    "canceled": QRStatus.FAILED,
    "cancelled": QRStatus.FAILED,
    "processing": QRStatus.PROCESSING,
}


def normalize_status(raw: str) -> QRStatus:
    return _STATUS_MAP.get(str(raw or "").lower(), QRStatus.CREATED)


class QRPaymentFlow:
    def __init__(
        self,
        client,
        project_id: str,
        amount,
        *,
        currency: str = DEFAULT_CURRENCY,
        poll_interval: float = QR_POLL_INTERVAL_SECONDS,
        expires_after: float = QR_EXPIRY_SECONDS,
        on_success: Optional[Callable[[QRPaymentSession], None]] = None,
        on_failure: Optional[Callable[[QRStatus], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.project_id = project_id
        self.amount = parse_price(amount)
        self.currency = currency
        self.poll_interval = poll_interval
        self.expires_after = expires_after
        self.on_success = on_success
        self.on_failure = on_failure
        self.clock = clock

        self.status: Optional[QRStatus] = None
        self.payment: Optional[QRPaymentSession] = None
        self.image_url: Optional[str] = None
        self.error: Optional[str] = None
        self.polls = 0
        self._started_at = 0.0
        self._generation = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def payment_id(self) -> Optional[str]:
        return self.payment.payment_id if self.payment else None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_polling(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def initialize(self) -> QRPaymentSession:
        """Demande un nouveau payload QR + payment_id et remet l'état à `created`."""
        payment = repository.create_qr_payment(
            self.client, project_id=self.project_id, amount=self.amount, currency=self.currency
        )
        with self._lock:
            self._generation += 1
            self.payment = payment
            self.image_url = qr_image_url(payment.qr_data)
            self.status = QRStatus.CREATED
            self.error = None
            self.polls = 0
            self._started_at = self.clock()
        logger.info("QR payment created payment_id=%s", payment.payment_id)
        return payment

    def start(self, background: bool = True) -> QRPaymentSession:
        """
        Initialise puis lance le polling.
        - background=True: boucle dans un thread daemon (retour immédiat)
        - background=False: boucle dans le thread appelant jusqu'à l'état terminal
        """
        payment = self.initialize()
        with self._lock:
            generation = self._generation
            # nouvelle génération en place avant de relancer: une réponse de l'ancienne boucle reste ignorée
            self._stop.clear()
        if background:
            self._thread = threading.Thread(
                target=self.run, args=(generation,), name=f"qr-poll-{payment.payment_id}", daemon=True
            )
            self._thread.start()
        else:
            self.run(generation)
        return payment

    def run(self, generation: Optional[int] = None) -> Optional[QRStatus]:
        """Boucle de polling: s'arrête sur état terminal, stop() ou expiration."""
        generation = self._generation if generation is None else generation
        while not self._stop.is_set() and generation == self._generation:
            if self.clock() - self._started_at >= self.expires_after:
                self._finish(QRStatus.EXPIRED, generation)
                break
            status = self.poll_once(generation)
            if status in TERMINAL_STATUSES:
                break
            if self._stop.wait(self.poll_interval):
                break
        return self.status

    def poll_once(self, generation: Optional[int] = None) -> Optional[QRStatus]:
        """
        Un appel au endpoint de statut.
        - Réponse ignorée si le flux a été stoppé/rafraîchi entre-temps
        - Erreur transitoire: loggée, statut inchangé; 401: échec du flux
        """
        generation = self._generation if generation is None else generation
        payment_id = self.payment_id
        if payment_id is None or self.is_terminal:
            return self.status
        try:
            raw = repository.check_qr_payment_status(self.client, payment_id)
        except UnauthorizedError as e:
            if generation == self._generation:
                self.error = e.message
            self._finish(QRStatus.FAILED, generation)
            return self.status
        except ApiError as e:
            logger.warning("QR status check failed payment_id=%s: %s", payment_id, e.message)
            return self.status

        with self._lock:
            if self._stop.is_set() or generation != self._generation:
                return self.status
            self.polls += 1
            status = normalize_status(raw)
            if status not in TERMINAL_STATUSES:
                self.status = status
        if status in TERMINAL_STATUSES:
            self._finish(status, generation)
        return self.status

    def _finish(self, status: QRStatus, generation: int) -> None:
        # Transition terminale unique par génération: les callbacks ne partent qu'une fois
        with self._lock:
            if self._stop.is_set() or generation != self._generation or self.is_terminal:
                return
            self.status = status
            payment = self.payment
        logger.info("QR payment %s payment_id=%s", status.value, payment.payment_id if payment else None)
        if status == QRStatus.SUCCEEDED:
            if self.on_success:
                self.on_success(payment)
        elif self.on_failure:
            self.on_failure(status)

    def stop(self) -> None:
        """Arrête le polling (teardown). Idempotent."""
        with self._lock:
            self._stop.set()
            # invalide la boucle en cours, même si elle survit au join
            self._generation += 1
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self.poll_interval, 1.0) + 1.0)
        self._thread = None

    close = stop

    def refresh(self, background: bool = True) -> QRPaymentSession:
        """Bouton "Refresh QR": nouveau paiement et nouvelle boucle de polling."""
        self.stop()
        return self.start(background=background)

    def __enter__(self) -> "QRPaymentFlow":
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

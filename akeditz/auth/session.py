"""
Session d'authentification explicite (utilisateur courant + token).
Passée au client API par injection; aucune variable globale.
"""
from typing import Callable, List, Optional
import logging
import threading

from akeditz.models.users import User
from .token_store import MemoryTokenStore

logger = logging.getLogger(__name__)

UnauthorizedListener = Callable[[], None]


class Session:
    """
    Un seul écrivain (services auth / client API), plusieurs lecteurs.
    Le verrou rend handle_unauthorized idempotent même si plusieurs
    requêtes échouent en 401 en parallèle.
    """

    def __init__(self, token_store=None):
        self._store = token_store if token_store is not None else MemoryTokenStore()
        self._lock = threading.Lock()
        self._listeners: List[UnauthorizedListener] = []
        self._token: Optional[str] = self._store.load()
        self.user: Optional[User] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token) and self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == "admin"

    def set(self, token: Optional[str], user: Optional[User]) -> None:
        with self._lock:
            if token:
                self._token = token
                self._store.save(token)
            self.user = user

    def set_user(self, user: Optional[User]) -> None:
        self.user = user

    def clear(self) -> None:
        with self._lock:
            self._clear_locked()

    def _clear_locked(self) -> None:
        self._token = None
        self.user = None
        self._store.clear()

    def handle_unauthorized(self, token: Optional[str]) -> bool:
        """
        Réaction à un 401 reçu pour une requête envoyée avec `token`.
        - Efface la session seulement si ce token est encore le token courant.
        - Notifie les abonnés une seule fois, hors verrou.
        Retour: True si la session a été effacée par cet appel.
        """
        with self._lock:
            if not token or token != self._token:
                return False
            self._clear_locked()
            listeners = list(self._listeners)
        logger.info("Session expirée: token effacé, %s abonné(s) notifié(s)", len(listeners))
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("unauthorized listener failed")
        return True

    def on_unauthorized(self, listener: UnauthorizedListener) -> Callable[[], None]:
        """Abonne un listener; retourne la fonction de désabonnement."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

"""
Persistance du token d'accès (équivalent du localStorage du front).
"""
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# module akeditz.auth.token_store
class MemoryTokenStore:
    """Stockage en mémoire (tests, scripts éphémères)."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """
    Stockage fichier (une ligne: le token).
    - Le dossier parent est créé au premier save.
    - Permissions 0600 pour ne pas exposer le bearer aux autres utilisateurs.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError:
            logger.exception("token_store.load failed path=%s", self.path)
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token + "\n", encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.warning("token_store.save could not chmod path=%s", self.path)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

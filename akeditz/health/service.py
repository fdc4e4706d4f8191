from typing import Any, Dict
import logging

from akeditz.infra.errors import ApiError

logger = logging.getLogger(__name__)

def health_info(client) -> Dict[str, Any]:
    """
    Vérifie la disponibilité du backend (GET /health).
    - Retour: {"connect_ok": bool, "base_url": str, "status"/"error": ...}
    """
    info: Dict[str, Any] = {"base_url": client.base_url, "connect_ok": False}
    try:
        body = client.get("/health")
    except ApiError as e:
        logger.warning("health check failed: %s", e.message)
        info["error"] = e.message
        return info
    info["connect_ok"] = True
    if isinstance(body, dict):
        info["status"] = body.get("status") or body.get("message")
    return info

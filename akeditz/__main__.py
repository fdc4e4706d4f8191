"""
Point d'entrée de diagnostic.

Usage:
    python -m akeditz

Vérifie la configuration et la disponibilité du backend:
- AKEDITZ_API_URL / VITE_API_URL: URL de l'API (voir akeditz.config)
- LOG_LEVEL: niveau de logs (ex: "info", "debug")
"""
import json
import logging
import os
import sys

from akeditz.auth import service as auth_service
from akeditz.config import STRIPE_PUBLISHABLE_KEY
from akeditz.health.service import health_info
from akeditz.infra.api_client import build_client


def main() -> int:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "info").upper())
    with build_client() as client:
        info = health_info(client)
        info["stripe_configured"] = bool(STRIPE_PUBLISHABLE_KEY)
        user = auth_service.check_auth_status(client) if info["connect_ok"] else None
        info["user"] = user.email if user else None
    print(json.dumps(info, indent=2, default=str))
    return 0 if info["connect_ok"] else 1


if __name__ == "__main__":
    sys.exit(main())

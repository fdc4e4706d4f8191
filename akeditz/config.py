"""
Configuration centrale du client AK Editz.

Le .env lu est celui de la racine du dépôt; les variables déjà présentes dans
l'environnement restent prioritaires. Expose l'URL de l'API, la clé publique
Stripe et les délais du parcours de paiement (retries, polling QR, redirection).
"""
from pathlib import Path
import os
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)

def _clean_env(v: str) -> str:
    # valeurs collées depuis un dashboard: guillemets ou backticks autour
    return (v or "").strip().strip("'").strip('"').strip("`")

def _float_env(name: str, default: float) -> float:
    try:
        return float(_clean_env(os.getenv(name, "")) or default)
    except ValueError:
        return default

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name, "")) or default)
    except ValueError:
        return default

def user_config_dir() -> Path:
    """Répertoire de config par utilisateur (XDG si défini, sinon ~/.config/akeditz)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "akeditz"
    return Path.home() / ".config" / "akeditz"

# API backend: l'URL peut venir des anciens noms de variables du front (VITE_*)
DEFAULT_API_BASE_URL = "https://ak-editz.onrender.com/api"
API_BASE_URL = _clean_env(
    os.getenv("AKEDITZ_API_URL")
    or os.getenv("VITE_API_URL")
    or os.getenv("VITE_API_BASE_URL")
    or DEFAULT_API_BASE_URL
)
if API_BASE_URL and not API_BASE_URL.startswith("http"):
    API_BASE_URL = "https://" + API_BASE_URL
API_BASE_URL = API_BASE_URL.rstrip("/")

HTTP_TIMEOUT_SECONDS = _float_env("AKEDITZ_HTTP_TIMEOUT", 30.0)

# Stripe: seule la clé publique est utilisée côté client
STRIPE_PUBLISHABLE_KEY = _clean_env(
    os.getenv("AKEDITZ_STRIPE_PUBLISHABLE_KEY") or os.getenv("VITE_STRIPE_PUBLISHABLE_KEY") or ""
)

# Persistance du token (équivalent du localStorage du navigateur)
TOKEN_FILE = Path(_clean_env(os.getenv("AKEDITZ_TOKEN_FILE", "")) or (user_config_dir() / "token"))

DEFAULT_CURRENCY = _clean_env(os.getenv("AKEDITZ_CURRENCY", "")) or "usd"

# Parcours de paiement
INTENT_MAX_RETRIES = _int_env("AKEDITZ_INTENT_MAX_RETRIES", 3)
INTENT_RETRY_DELAY_SECONDS = _float_env("AKEDITZ_INTENT_RETRY_DELAY", 2.0)

QR_IMAGE_SERVICE_URL = _clean_env(
    os.getenv("AKEDITZ_QR_IMAGE_SERVICE_URL", "")
) or "https://api.qrserver.com/v1/create-qr-code/"
QR_POLL_INTERVAL_SECONDS = _float_env("AKEDITZ_QR_POLL_INTERVAL", 3.0)
QR_EXPIRY_SECONDS = _float_env("AKEDITZ_QR_EXPIRY", 15 * 60)

SUCCESS_REDIRECT_DELAY_SECONDS = _float_env("AKEDITZ_SUCCESS_REDIRECT_DELAY", 3.0)
DASHBOARD_PATH = "/dashboard"
LOGIN_PATH = "/login"

"""
Accès REST pour la newsletter (abonnement public + consultation admin).
"""
from typing import Any, Dict, List, Optional

from akeditz.infra.errors import ClientError
from akeditz.models.envelope import unwrap
from akeditz.models.newsletter import NewsletterSubscriber
from akeditz.utils.validators import is_valid_email

def _require_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not is_valid_email(email):
        # Même forme d'erreur que le backend pour un 400
        raise ClientError("Please enter a valid email address", status=400)
    return email

def subscribe(client, email: str, name: Optional[str] = None, source: str = "website") -> NewsletterSubscriber:
    """
    Abonne un email. Lève ClientError(409) si déjà abonné (message backend).
    """
    email = _require_email(email)
    body = client.post("/newsletter/subscribe", json={"email": email, "name": name, "source": source})
    data = unwrap(body, "subscriber")
    if not isinstance(data, dict):
        data = {}
    return NewsletterSubscriber.model_validate({"email": email, "name": name, "source": source, **data})

def unsubscribe(client, email: str) -> None:
    client.post("/newsletter/unsubscribe", json={"email": _require_email(email)})

def list_subscribers(client, **params: Any) -> List[NewsletterSubscriber]:
    data = unwrap(client.get("/newsletter/subscribers", params=params), "subscribers") or []
    return [NewsletterSubscriber.model_validate(s) for s in data]

def get_subscriber(client, email: str) -> NewsletterSubscriber:
    body = client.get(f"/newsletter/subscriber/{_require_email(email)}")
    return NewsletterSubscriber.model_validate(unwrap(body, "subscriber"))

def get_stats(client) -> Dict[str, Any]:
    return unwrap(client.get("/newsletter/stats"), "stats") or {}

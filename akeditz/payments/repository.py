"""
Accès REST pour la feature 'payments' (intents, QR, historique, admin).
"""
from typing import Any, Dict, List, Optional

from akeditz.models.envelope import unwrap
from akeditz.models.payments import Payment, PaymentIntent, PaymentStatus, QRPaymentSession
from akeditz.models.projects import Project

# module akeditz.payments.repository
def create_payment_intent(client, *, project_id: str, amount: float, currency: str) -> PaymentIntent:
    """
    Demande au backend un PaymentIntent Stripe pour un projet.
    - amount: montant en unités (ex: 49.99), déjà validé par l'appelant
    Retour: PaymentIntent (client_secret opaque + id de l'intent)
    """
    body = client.post(
        "/payments/create-payment-intent",
        json={"projectId": project_id, "amount": amount, "currency": currency},
    )
    return PaymentIntent.model_validate(unwrap(body))

def confirm_payment(client, payment_intent_id: str) -> Payment:
    """Finalise côté serveur un paiement carte confirmé par le SDK."""
    body = client.post("/payments/confirm-payment", json={"paymentIntentId": payment_intent_id})
    return Payment.model_validate(unwrap(body, "payment"))

def create_qr_payment(client, *, project_id: str, amount: float, currency: str) -> QRPaymentSession:
    body = client.post(
        "/payments/create-qr-payment",
        json={"projectId": project_id, "amount": amount, "currency": currency},
    )
    return QRPaymentSession.model_validate(unwrap(body))

def check_qr_payment_status(client, payment_id: str) -> str:
    """Statut brut du paiement QR (ex: "created", "processing", "paid")."""
    data = unwrap(client.get(f"/payments/check-qr-payment-status/{payment_id}"))
    if isinstance(data, dict):
        data = data.get("status")
    return str(data or PaymentStatus.CREATED.value)

def get_purchased_projects(client) -> List[Project]:
    return [Project.model_validate(p) for p in (unwrap(client.get("/payments/my-projects"), "projects") or [])]

def get_user_payments(client, **params: Any) -> List[Payment]:
    return [Payment.model_validate(p) for p in (unwrap(client.get("/payments/user-payments", params=params), "payments") or [])]

def get_payment(client, payment_id: str) -> Payment:
    return Payment.model_validate(unwrap(client.get(f"/payments/{payment_id}"), "payment"))

def get_invoice(client, payment_id: str) -> Dict[str, Any]:
    return unwrap(client.get(f"/payments/invoice/{payment_id}"), "invoice") or {}

# --- Admin ---

def list_all_payments(client, *, status: Optional[str] = None, page: Optional[int] = None, limit: Optional[int] = None) -> List[Payment]:
    body = client.get("/payments/admin/all", params={"status": status, "page": page, "limit": limit})
    return [Payment.model_validate(p) for p in (unwrap(body, "payments") or [])]

def get_payment_stats(client) -> Dict[str, Any]:
    return unwrap(client.get("/payments/admin/stats/overview"), "stats") or {}

def refund_payment(client, payment_id: str) -> Payment:
    return Payment.model_validate(unwrap(client.post(f"/payments/admin/refund/{payment_id}"), "payment"))

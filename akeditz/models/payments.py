from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import model_validator

from .base import ApiModel, id_field, ref_id


class PaymentStatus(str, Enum):
    CREATED = "created"
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELED = "canceled"
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_ACTION = "requires_action"


SUCCESSFUL_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.SUCCEEDED})


class Payment(ApiModel):
    id: Optional[str] = id_field()
    user: Optional[str] = None
    project: Optional[str] = None
    project_title: Optional[str] = None
    amount: Optional[float] = None
    currency: str = "usd"
    status: PaymentStatus = PaymentStatus.CREATED
    payment_intent_id: Optional[str] = None
    qr_payment_id: Optional[str] = None
    payment_method_type: Optional[str] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_refs(cls, data: Any) -> Any:
        # user/project peuvent arriver peuplés (documents) ou en id brut
        if not isinstance(data, dict):
            return data
        data = dict(data)
        project = data.get("project")
        if isinstance(project, dict) and not data.get("projectTitle"):
            data["projectTitle"] = project.get("title")
        data["project"] = ref_id(project)
        data["user"] = ref_id(data.get("user"))
        return data

    @property
    def is_successful(self) -> bool:
        return self.status in SUCCESSFUL_STATUSES


class PaymentIntent(ApiModel):
    """Intent créé par le backend: le client_secret est opaque et réservé au SDK Stripe."""
    client_secret: str
    payment_intent_id: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None

    @model_validator(mode="after")
    def _intent_id_from_secret(self):
        # Format Stripe: "pi_xxx_secret_yyy"
        if not self.payment_intent_id and "_secret_" in self.client_secret:
            self.payment_intent_id = self.client_secret.split("_secret_", 1)[0]
        return self


class QRPaymentSession(ApiModel):
    payment_id: str
    qr_data: str
    amount: Optional[float] = None
    currency: Optional[str] = None
    expires_at: Optional[datetime] = None

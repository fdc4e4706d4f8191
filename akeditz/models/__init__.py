"""
DTO du domaine AK Editz (miroir des ressources du backend).
"""
from .base import ApiModel
from .envelope import Page, unwrap, page_meta
from .users import User
from .projects import Project, ProjectAccess
from .payments import Payment, PaymentIntent, PaymentStatus, QRPaymentSession, SUCCESSFUL_STATUSES
from .blogs import Blog
from .newsletter import NewsletterSubscriber

__all__ = [
    "ApiModel",
    "Page",
    "unwrap",
    "page_meta",
    "User",
    "Project",
    "ProjectAccess",
    "Payment",
    "PaymentIntent",
    "PaymentStatus",
    "QRPaymentSession",
    "SUCCESSFUL_STATUSES",
    "Blog",
    "NewsletterSubscriber",
]

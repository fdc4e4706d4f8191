from datetime import datetime
from typing import Optional

from .base import ApiModel, id_field


class NewsletterSubscriber(ApiModel):
    id: Optional[str] = id_field()
    email: str
    name: Optional[str] = None
    source: str = "website"
    subscribed_at: Optional[datetime] = None
    is_active: bool = True

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .base import ApiModel, id_field, ref_id


class User(ApiModel):
    id: Optional[str] = id_field()
    name: str = ""
    email: str = ""
    role: Literal["user", "admin"] = "user"
    status: str = "active"
    avatar: str = ""
    purchased_projects: List[str] = Field(default_factory=list)
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("role", mode="before")
    @classmethod
    def _role_lower(cls, v):
        # Rôle inconnu => "user" (même règle que determine_role côté serveur)
        return "admin" if str(v or "").lower() == "admin" else "user"

    @field_validator("purchased_projects", mode="before")
    @classmethod
    def _purchased_ids(cls, v):
        return [ref for ref in (ref_id(item) for item in (v or [])) if ref]

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

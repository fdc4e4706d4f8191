from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from .base import ApiModel, id_field


class Project(ApiModel):
    """
    Projet en vente. `price` est gardé brut (str|int|float) tel que renvoyé
    par le backend: il n'est validé qu'au moment du checkout.
    """
    id: Optional[str] = id_field()
    title: str = ""
    description: str = ""
    short_description: str = ""
    price: Any = None
    category: str = ""
    technologies: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False
    source_code: Optional[str] = None
    demo_url: Optional[str] = None
    documentation: Optional[str] = None
    created_at: Optional[datetime] = None


class ProjectAccess(ApiModel):
    project_id: Optional[str] = None
    purchased: bool = False
    demo_url: Optional[str] = None
    source_code: Optional[str] = None
    documentation: Optional[str] = None

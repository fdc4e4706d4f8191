from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel, id_field


class Blog(ApiModel):
    id: Optional[str] = id_field()
    title: str = ""
    slug: Optional[str] = None
    content: str = ""
    excerpt: str = ""
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    featured_image: Optional[str] = None
    is_published: bool = False
    featured: bool = False
    views: int = 0
    created_at: Optional[datetime] = None

"""
Accès REST pour la feature 'blogs'.
"""
from typing import Any, Dict, List, Optional

from akeditz.models.blogs import Blog
from akeditz.models.envelope import Page, page_meta, unwrap

def _blog(body: Any) -> Blog:
    return Blog.model_validate(unwrap(body, "blog"))

def _blogs(body: Any) -> List[Blog]:
    return [Blog.model_validate(b) for b in (unwrap(body, "blogs") or [])]

def _page(body: Any) -> Page[Blog]:
    return Page[Blog](items=_blogs(body), **page_meta(body))

def list_blogs(
    client,
    *,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> Page[Blog]:
    return _page(client.get("/blogs", params={"page": page, "limit": limit, "category": category, "search": search}))

def get_blog(client, blog_id: str) -> Blog:
    return _blog(client.get(f"/blogs/{blog_id}"))

def get_featured(client) -> List[Blog]:
    return _blogs(client.get("/blogs/featured"))

def get_by_category(client, category: str) -> List[Blog]:
    return _blogs(client.get(f"/blogs/category/{category}"))

def increment_views(client, blog_id: str) -> Optional[int]:
    """Incrémente le compteur de vues; retourne la nouvelle valeur si le backend la renvoie."""
    data = unwrap(client.patch(f"/blogs/{blog_id}/views"))
    views = data.get("views") if isinstance(data, dict) else None
    return int(views) if views is not None else None

# --- Admin ---

def list_admin_blogs(client, **params: Any) -> Page[Blog]:
    return _page(client.get("/blogs/admin/all", params=params))

def create_blog(client, data: Dict[str, Any]) -> Blog:
    return _blog(client.post("/blogs", json=data))

def update_blog(client, blog_id: str, data: Dict[str, Any]) -> Blog:
    return _blog(client.put(f"/blogs/{blog_id}", json=data))

def delete_blog(client, blog_id: str) -> None:
    client.delete(f"/blogs/{blog_id}")

def toggle_publish(client, blog_id: str) -> Blog:
    return _blog(client.patch(f"/blogs/{blog_id}/toggle-publish"))

def get_stats(client) -> Dict[str, Any]:
    return unwrap(client.get("/blogs/admin/stats"), "stats") or {}

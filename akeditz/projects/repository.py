"""
Accès REST pour la feature 'projects'.
"""
from typing import Any, Dict, List, Optional

from akeditz.models.envelope import Page, page_meta, unwrap
from akeditz.models.projects import Project

# module akeditz.projects.repository
def _project(body: Any) -> Project:
    return Project.model_validate(unwrap(body, "project"))

def _projects(body: Any) -> List[Project]:
    return [Project.model_validate(p) for p in (unwrap(body, "projects") or [])]

def _page(body: Any) -> Page[Project]:
    return Page[Project](items=_projects(body), **page_meta(body))

def list_projects(
    client,
    *,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> Page[Project]:
    """
    Liste paginée des projets actifs.
    - Filtres optionnels: category, search, sort (ignorés si None)
    """
    params = {"page": page, "limit": limit, "category": category, "search": search, "sort": sort}
    return _page(client.get("/projects", params=params))

def get_project(client, project_id: str) -> Project:
    return _project(client.get(f"/projects/{project_id}"))

def get_featured(client) -> List[Project]:
    return _projects(client.get("/projects/featured"))

def get_by_category(client, category: str, *, page: Optional[int] = None, limit: Optional[int] = None) -> Page[Project]:
    return _page(client.get(f"/projects/category/{category}", params={"page": page, "limit": limit}))

def get_similar(client, project_id: str) -> List[Project]:
    return _projects(client.get(f"/projects/similar/{project_id}"))

# --- Admin ---

def list_admin_projects(client, **params: Any) -> Page[Project]:
    """Tous les projets, inactifs compris (admin)."""
    return _page(client.get("/projects/admin/all", params=params))

def create_project(client, data: Dict[str, Any]) -> Project:
    return _project(client.post("/projects", json=data))

def update_project(client, project_id: str, data: Dict[str, Any]) -> Project:
    return _project(client.put(f"/projects/{project_id}", json=data))

def delete_project(client, project_id: str) -> None:
    client.delete(f"/projects/{project_id}")

def toggle_active(client, project_id: str) -> Project:
    return _project(client.patch(f"/projects/{project_id}/toggle-active"))

def toggle_featured(client, project_id: str) -> Project:
    return _project(client.patch(f"/projects/{project_id}/toggle-featured"))

def get_stats(client) -> Dict[str, Any]:
    return unwrap(client.get("/projects/admin/stats"), "stats") or {}

"""
Couche de normalisation unique des réponses backend.
Le backend renvoie des enveloppes variables:
  {success, data}, {success, <clé>}, {data: {<clé>}} ou un tableau brut.
`unwrap` est le seul endroit qui connaît ces formes; les repositories
valident ensuite le résultat en DTO.
"""
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import Field

from .base import ApiModel

T = TypeVar("T")

# module akeditz.models.envelope
def unwrap(body: Any, key: Optional[str] = None) -> Any:
    """
    Extrait la ressource d'une réponse.
    - key: nom de la ressource attendue (ex: "project", "projects")
    - Retourne body tel quel si ce n'est pas un dict (tableau brut, None)
    """
    if not isinstance(body, dict):
        return body
    if key and key in body:
        return body[key]
    data = body.get("data", body)
    if key and isinstance(data, dict) and key in data:
        return data[key]
    return data


class Page(ApiModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    total: int = 0
    total_pages: int = 1
    current_page: int = 1


def page_meta(body: Any) -> dict:
    """Métadonnées de pagination, au niveau racine ou sous `data`."""
    if not isinstance(body, dict):
        return {}
    source = body.get("data") if isinstance(body.get("data"), dict) else body
    meta = {}
    for src, dst in (("total", "total"), ("totalPages", "total_pages"), ("currentPage", "current_page")):
        if source.get(src) is not None:
            meta[dst] = source[src]
        elif body.get(src) is not None:
            meta[dst] = body[src]
    return meta

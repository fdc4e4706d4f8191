"""Couche d'accès REST pour le domaine Utilisateurs (endpoints admin, sauf /users/count)."""
from typing import Any, Dict, List

from akeditz.models.envelope import unwrap
from akeditz.models.users import User

def list_users(client) -> List[User]:
    return [User.model_validate(u) for u in (unwrap(client.get("/users"), "users") or [])]

def get_user(client, user_id: str) -> User:
    return User.model_validate(unwrap(client.get(f"/users/{user_id}"), "user"))

def update_user(client, user_id: str, data: Dict[str, Any]) -> User:
    """Mise à jour admin (ex: role, status)."""
    return User.model_validate(unwrap(client.put(f"/users/{user_id}", json=data), "user"))

def delete_user(client, user_id: str) -> None:
    client.delete(f"/users/{user_id}")

def get_stats(client) -> Dict[str, Any]:
    return unwrap(client.get("/users/stats"), "stats") or {}

def get_user_count(client) -> int:
    """Nombre d'utilisateurs (public, affiché sur la page d'accueil)."""
    data = unwrap(client.get("/users/count"), "count")
    if isinstance(data, dict):
        data = data.get("count")
    return int(data or 0)

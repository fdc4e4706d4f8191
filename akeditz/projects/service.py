"""
Cas d'usage 'projects': accès aux liens protégés (source, documentation).
"""
from typing import Iterable, Optional

from akeditz.models.projects import Project, ProjectAccess
from akeditz.models.users import User
from akeditz.payments import repository as payments_repository
from . import repository

def project_access(project: Project, user: Optional[User], purchased_ids: Iterable[str]) -> ProjectAccess:
    """
    Calcule ce que l'utilisateur peut voir d'un projet.
    - demo_url: toujours public
    - source_code / documentation: acheteurs et admins uniquement
    """
    purchased = bool(project.id) and project.id in set(purchased_ids or [])
    unlocked = purchased or (user is not None and user.is_admin)
    return ProjectAccess(
        project_id=project.id,
        purchased=purchased,
        demo_url=project.demo_url,
        source_code=project.source_code if unlocked else None,
        documentation=project.documentation if unlocked else None,
    )

def purchased_project_ids(client) -> set:
    """Ids des projets achetés par l'utilisateur courant (vide si anonyme)."""
    if not client.session.token:
        return set()
    return {p.id for p in payments_repository.get_purchased_projects(client) if p.id}

def get_project_with_access(client, project_id: str):
    """Retourne (project, access) pour l'utilisateur de la session."""
    project = repository.get_project(client, project_id)
    user = client.session.user
    owned = set(user.purchased_projects) if user else set()
    if user and project.id not in owned:
        owned |= purchased_project_ids(client)
    return project, project_access(project, user, owned)

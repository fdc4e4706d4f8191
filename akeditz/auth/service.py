from typing import Any, Dict, Optional
import logging

from pydantic import ValidationError

from akeditz.infra.errors import ApiError
from akeditz.models.envelope import unwrap
from akeditz.models.users import User
from .models import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    first_validation_message,
    handle_exception,
    make_auth_response,
)
from . import repository

logger = logging.getLogger(__name__)

# --- Cas d'usage Auth exposés ---

def login(client, email: str, password: str) -> AuthResponse:
    """Connexion:
    - Valide le formulaire avant tout appel réseau
    - POST /auth/login puis enregistre token + utilisateur dans la Session
    """
    try:
        req = LoginRequest(email=(email or "").strip(), password=password or "")
    except ValidationError as e:
        return AuthResponse(False, error=first_validation_message(e))
    try:
        body = repository.login(client, req.email, req.password)
    except ApiError as e:
        return handle_exception("login", e)
    res = make_auth_response(body)
    if res.success:
        client.session.set(res.token, res.user)
    return res

def register(
    client,
    name: str,
    email: str,
    password: str,
    confirm_password: Optional[str] = None,
) -> AuthResponse:
    """Inscription:
    - Règles du formulaire (nom <= 50, email valide, mot de passe >= 6, confirmation)
    - Le backend connecte directement l'utilisateur (token renvoyé)
    """
    try:
        req = RegisterRequest(
            name=name,
            email=(email or "").strip(),
            password=password or "",
            confirm_password=confirm_password,
        )
    except ValidationError as e:
        return AuthResponse(False, error=first_validation_message(e))
    try:
        body = repository.register(client, {"name": req.name, "email": req.email, "password": req.password})
    except ApiError as e:
        return handle_exception("register", e)
    res = make_auth_response(body, fallback_error="Registration failed")
    if res.success:
        client.session.set(res.token, res.user)
    return res

def logout(client) -> None:
    """Déconnexion: l'échec backend est ignoré, l'état local est toujours effacé."""
    try:
        repository.logout(client)
    except ApiError as e:
        logger.info("Logout API not available, clearing local state only (%s)", e.message)
    finally:
        client.session.clear()

def check_auth_status(client) -> Optional[User]:
    """
    Restaure l'utilisateur au démarrage à partir du token persisté.
    - Sans token: None, aucun appel
    - En cas d'échec: token effacé
    """
    if not client.session.token:
        return None
    try:
        body = repository.get_current_user(client)
    except ApiError as e:
        logger.warning("Auth check failed: %s", e.message)
        client.session.clear()
        return None
    user = User.model_validate(unwrap(body, "user"))
    client.session.set_user(user)
    return user

def update_profile(client, **fields: Any) -> AuthResponse:
    payload: Dict[str, Any] = {k: v for k, v in fields.items() if v is not None}
    try:
        body = repository.update_profile(client, payload)
    except ApiError as e:
        return handle_exception("update_profile", e)
    user = User.model_validate(unwrap(body, "user"))
    client.session.set_user(user)
    return AuthResponse(True, user=user, data=body if isinstance(body, dict) else {})

def change_password(client, current_password: str, new_password: str) -> AuthResponse:
    try:
        req = ChangePasswordRequest(current_password=current_password or "", new_password=new_password or "")
    except ValidationError as e:
        return AuthResponse(False, error=first_validation_message(e))
    try:
        body = repository.change_password(client, req.current_password, req.new_password)
    except ApiError as e:
        return handle_exception("change_password", e)
    return AuthResponse(True, data=body if isinstance(body, dict) else {})

def forgot_password(client, email: str) -> AuthResponse:
    try:
        body = repository.forgot_password(client, (email or "").strip())
    except ApiError as e:
        return handle_exception("forgot_password", e)
    return AuthResponse(True, data=body if isinstance(body, dict) else {})

def reset_password(client, token: str, password: str, confirm_password: Optional[str] = None) -> AuthResponse:
    try:
        req = ResetPasswordRequest(password=password or "", confirm_password=confirm_password)
    except ValidationError as e:
        return AuthResponse(False, error=first_validation_message(e))
    try:
        body = repository.reset_password(client, token, req.password)
    except ApiError as e:
        return handle_exception("reset_password", e)
    return AuthResponse(True, data=body if isinstance(body, dict) else {})

def validate_reset_token(client, token: str) -> bool:
    if not token:
        return False
    try:
        repository.validate_reset_token(client, token)
    except ApiError:
        return False
    return True

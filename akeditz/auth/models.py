from typing import Any, Dict, Optional
import logging

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator, model_validator

from akeditz.models.users import User
from akeditz.utils.validators import validate_name, validate_password

logger = logging.getLogger(__name__)


class AuthResponse:
    def __init__(
        self,
        success: bool,
        user: Optional[User] = None,
        token: Optional[str] = None,
        error: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.success = success
        self.user = user
        self.token = token
        self.error = error
        self.data = data or {}

    @property
    def message(self) -> Optional[str]:
        return self.data.get("message")


def make_auth_response(body: Any, fallback_error: str = "Invalid email or password") -> AuthResponse:
    """
    Normalise la réponse login/register du backend: {success, token, user}.
    Sans token ni utilisateur, la réponse est considérée en échec.
    """
    payload = body if isinstance(body, dict) else {}
    token = payload.get("token")
    raw_user = payload.get("user")
    if not token and not raw_user:
        return AuthResponse(False, error=payload.get("message") or fallback_error, data=payload)
    user = User.model_validate(raw_user) if isinstance(raw_user, dict) else None
    return AuthResponse(True, user=user, token=token, data=payload)


def handle_exception(action: str, e: Exception) -> AuthResponse:
    logger.exception("Erreur %s", action)
    message = getattr(e, "message", None) or str(e)
    return AuthResponse(False, error=message)


def first_validation_message(e: ValidationError) -> str:
    """Premier message lisible d'une ValidationError pydantic (sans le préfixe 'Value error, ')."""
    errors = e.errors()
    if not errors:
        return "Validation failed"
    msg = str(errors[0].get("msg") or "Validation failed")
    return msg.removeprefix("Value error, ")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    confirm_password: Optional[str] = None

    @field_validator("name")
    def name_rules(cls, v: str) -> str:
        return validate_name(v)

    @field_validator("password")
    def password_rules(cls, v: str) -> str:
        return validate_password(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    def password_rules(cls, v: str) -> str:
        return validate_password(v)


class ResetPasswordRequest(BaseModel):
    password: str
    confirm_password: Optional[str] = None

    @field_validator("password")
    def password_rules(cls, v: str) -> str:
        return validate_password(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self

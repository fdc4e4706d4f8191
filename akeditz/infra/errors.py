"""
Erreurs normalisées renvoyées par le client API.
- Une seule hiérarchie (ApiError) quel que soit le code HTTP.
- Le message est déjà prêt pour l'affichage (bannière/toast).
"""
from typing import Any, Dict, List, Optional

NETWORK_ERROR_MESSAGE = "Network error: Unable to connect to server"

# Messages par défaut quand le backend ne fournit pas de "message"
_DEFAULT_MESSAGES: Dict[int, str] = {
    400: "Bad request",
    401: "Unauthorized access",
    403: "Access forbidden",
    404: "Resource not found",
    409: "Conflict occurred",
    422: "Validation failed",
    429: "Too many requests",
    500: "Internal server error",
}

# Codes pour lesquels le message du backend est ignoré
_FIXED_MESSAGES: Dict[int, str] = {
    502: "Bad gateway",
    503: "Service unavailable",
}


class ApiError(Exception):
    kind = "unknown"

    def __init__(self, message: str, status: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


class NetworkError(ApiError):
    kind = "network"

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message)


class ClientError(ApiError):
    kind = "validation"


class UnauthorizedError(ClientError):
    kind = "unauthorized"


class ServerError(ApiError):
    kind = "server"


def error_message(status: int, data: Any) -> str:
    """
    Construit le message utilisateur pour une réponse en erreur.
    - 502/503: message fixe
    - sinon: data.message si présent, puis défaut par code, puis "Error <status>"
    - data.errors (liste) est ajouté en suffixe ": a, b"
    """
    payload = data if isinstance(data, dict) else {}
    if status in _FIXED_MESSAGES:
        message = _FIXED_MESSAGES[status]
    else:
        message = payload.get("message") or _DEFAULT_MESSAGES.get(status) or f"Error {status}"
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        message += ": " + ", ".join(str(e) for e in errors)
    return message


def error_from_response(status: int, data: Any) -> ApiError:
    message = error_message(status, data)
    if status == 401:
        return UnauthorizedError(message, status=status, data=data)
    if status >= 500:
        return ServerError(message, status=status, data=data)
    return ClientError(message, status=status, data=data)


def is_unauthorized(error: Exception) -> bool:
    return getattr(error, "status", None) == 401


def is_not_found(error: Exception) -> bool:
    return getattr(error, "status", None) == 404


def is_server_error(error: Exception) -> bool:
    status = getattr(error, "status", None)
    return status is not None and status >= 500


def validation_errors(error: Exception) -> List[str]:
    data = getattr(error, "data", None)
    if isinstance(data, dict) and isinstance(data.get("errors"), list):
        return [str(e) for e in data["errors"]]
    return []

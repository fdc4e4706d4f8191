"""
Client REST du backend AK Editz (wrapper httpx).
- Attache le bearer de la Session injectée.
- Convertit toute erreur HTTP/transport en ApiError (voir errors.py).
- Délègue la réaction au 401 à la Session (effacement + notification uniques).
"""
from typing import Any, Dict, Optional
import logging

import httpx

from akeditz.config import API_BASE_URL, HTTP_TIMEOUT_SECONDS, TOKEN_FILE
from akeditz.auth.session import Session
from akeditz.auth.token_store import FileTokenStore
from .errors import ApiError, NetworkError, error_from_response

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        session: Optional[Session] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.session = session if session is not None else Session()
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """
        Envoie une requête et retourne le corps JSON décodé (None si vide/non JSON).
        Lève ApiError (NetworkError, ClientError, UnauthorizedError, ServerError).
        """
        token = self.session.token
        headers: Dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            resp = self.http.request(
                method,
                self.url(path),
                params=clean_params or None,
                json=json,
                headers=headers,
            )
        except httpx.TransportError as e:
            logger.warning("api %s %s: transport error %s", method, path, e)
            raise NetworkError() from e

        body = _decode_body(resp)
        if 200 <= resp.status_code < 300:
            return body

        error = error_from_response(resp.status_code, body)
        logger.error("api %s %s failed: status=%s message=%s", method, path, resp.status_code, error.message)
        if resp.status_code == 401:
            self.session.handle_unauthorized(token)
        raise error

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _decode_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


def build_client(base_url: str = API_BASE_URL, token_file=TOKEN_FILE) -> ApiClient:
    """Client prêt à l'emploi: session persistée dans token_file (le token survit au process)."""
    return ApiClient(base_url, session=Session(FileTokenStore(token_file)))


__all__ = ["ApiClient", "ApiError", "build_client"]

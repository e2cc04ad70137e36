"""
CRM API client for scripts and tooling.

    client = CRMClient("http://localhost:5000/api", token_path="~/.crm_token.json")
    client.login("admin@example.com", "secret")
    customers = client.get("/customers")

The token and user summary are kept in a small JSON file so consecutive runs
share one session. Any 401 clears that file and raises SessionExpired.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Any

import httpx

logger = logging.getLogger("crm_client")

DEFAULT_TIMEOUT = 15.0


class APIError(Exception):
    """Non-2xx response; message is the server's `message` field."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload


class SessionExpired(APIError):
    pass


class TokenStore:
    """{token, user} persisted as JSON. No path means memory only."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path).expanduser() if path else None
        self._data = {}
        if self.path and self.path.exists():
            try:
                self._data = json.loads(self.path.read_text())
            except ValueError:
                logger.warning(f"Ignoring unreadable token store {self.path}")
                self._data = {}

    @property
    def token(self) -> Optional[str]:
        return self._data.get("token")

    @property
    def user(self) -> Optional[dict]:
        return self._data.get("user")

    def save(self, token: str, user: dict):
        self._data = {"token": token, "user": user}
        if self.path:
            self.path.write_text(json.dumps(self._data))

    def clear(self):
        self._data = {}
        if self.path and self.path.exists():
            self.path.unlink()


class CRMClient:

    def __init__(
        self,
        base_url: str,
        token_path: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.store = TokenStore(token_path)
        self._http = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ==================== SESSION ====================

    @property
    def user(self) -> Optional[dict]:
        return self.store.user

    @property
    def is_authenticated(self) -> bool:
        return bool(self.store.token)

    def login(self, email: str, password: str) -> dict:
        data = self.request("POST", "/users/login", json={"email": email, "password": password})
        self.store.save(data["token"], data["user"])
        return data["user"]

    def register(self, **fields) -> dict:
        data = self.request("POST", "/users/register", json=fields)
        self.store.save(data["token"], data["user"])
        return data["user"]

    def logout(self):
        self.store.clear()

    # ==================== REQUESTS ====================

    def request(self, method: str, path: str, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.store.token:
            headers["Authorization"] = f"Bearer {self.store.token}"

        resp = self._http.request(method, path, headers=headers, **kwargs)

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code == 401:
            self.store.clear()
            raise SessionExpired(401, _message(payload, "Session expired"), payload)

        if resp.status_code >= 400:
            raise APIError(resp.status_code, _message(payload, resp.reason_phrase), payload)

        return payload

    def get(self, path: str, **params) -> Any:
        return self.request("GET", path, params=params or None)

    def post(self, path: str, data: Optional[dict] = None) -> Any:
        return self.request("POST", path, json=data or {})

    def put(self, path: str, data: Optional[dict] = None) -> Any:
        return self.request("PUT", path, json=data or {})

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)


def _message(payload: Any, default: str) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return payload["message"]
    return default

"""Thin httpx client for the Keycloak OpenID Connect and admin REST APIs."""
from __future__ import annotations

import base64
import json
import logging
from typing import Any, Optional, Sequence

import httpx

from ..core.exceptions import AuthenticationError, IdentityProviderError, NotFoundError

logger = logging.getLogger(__name__)

INCOMPLETE_ACCOUNT_MESSAGE = (
    "Your account setup is incomplete. Please log into the admin portal to complete your profile "
    "(Last name required)."
)


def decode_token_claims(token: str) -> dict:
    """Read the payload of a JWT without verifying it.

    Only used on tokens received directly from the token endpoint.
    """

    parts = token.split(".")
    if len(parts) != 3:
        return {}
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload.encode("ascii")))
    except ValueError:
        return {}
    return claims if isinstance(claims, dict) else {}


class KeycloakClient:
    def __init__(
        self,
        *,
        issuer: str,
        realm: str,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._issuer = issuer.rstrip("/")
        self._realm = realm
        self._client_id = client_id
        self._client_secret = client_secret
        self._http = httpx.Client(timeout=timeout, transport=transport)

    @property
    def server_url(self) -> str:
        return self._issuer.split("/realms/")[0]

    @property
    def admin_url(self) -> str:
        return f"{self.server_url}/admin/realms/{self._realm}"

    def close(self) -> None:
        self._http.close()

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Identity provider unreachable: %s %s (%s)", method, url, e)
            raise IdentityProviderError("Identity provider is unavailable")

    # -------- OpenID Connect --------
    def password_grant(self, username: str, password: str) -> dict:
        resp = self._send(
            "POST",
            f"{self._issuer}/protocol/openid-connect/token",
            data={
                "grant_type": "password",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "username": username,
                "password": password,
                "scope": "openid email profile",
            },
        )
        if resp.status_code in (400, 401):
            body = _json_or_empty(resp)
            if body.get("error") == "invalid_grant" and body.get("error_description") == "Account is not fully set up":
                raise AuthenticationError(INCOMPLETE_ACCOUNT_MESSAGE)
            raise AuthenticationError(body.get("error_description") or "Authentication failed")
        self._raise_for_status(resp, "token request")
        return resp.json()

    def userinfo(self, access_token: str) -> dict:
        resp = self._send(
            "GET",
            f"{self._issuer}/protocol/openid-connect/userinfo",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        self._raise_for_status(resp, "userinfo request")
        return resp.json()

    # -------- Admin REST API --------
    def _admin_token(self) -> str:
        resp = self._send(
            "POST",
            f"{self._issuer}/protocol/openid-connect/token",
            data={
                "grant_type": "client_credentials",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            },
        )
        self._raise_for_status(resp, "admin token request")
        return resp.json()["access_token"]

    def _admin(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._admin_token()}"}
        resp = self._send(method, f"{self.admin_url}{path}", headers=headers, **kwargs)
        if resp.status_code == 404:
            raise NotFoundError("User not found")
        self._raise_for_status(resp, f"admin {method} {path}")
        return resp

    def list_users(self, *, max_results: int = 500) -> list[dict]:
        return self._admin("GET", "/users", params={"max": max_results}).json()

    def create_user(self, representation: dict) -> str:
        resp = self._admin("POST", "/users", json=representation)
        location = resp.headers.get("Location", "")
        return location.rstrip("/").rsplit("/", 1)[-1]

    def delete_user(self, user_id: str) -> None:
        self._admin("DELETE", f"/users/{user_id}")

    def execute_actions_email(self, user_id: str, actions: Sequence[str], *, lifespan: Optional[int] = None) -> None:
        params = {"lifespan": lifespan} if lifespan is not None else None
        self._admin("PUT", f"/users/{user_id}/execute-actions-email", params=params, json=list(actions))

    @staticmethod
    def _raise_for_status(resp: httpx.Response, what: str) -> None:
        if resp.status_code == 403:
            raise IdentityProviderError(
                "Identity provider refused the request; the client needs the realm-management "
                "'manage-users' and 'view-users' roles"
            )
        if resp.is_error:
            logger.error("Identity provider %s failed with HTTP %s", what, resp.status_code)
            raise IdentityProviderError(f"Identity provider {what} failed")


def _json_or_empty(resp: httpx.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}

from __future__ import annotations

import logging
import re
from typing import Any

from ..common.validators import require_non_empty
from ..core.constants import RESET_PASSWORD_LIFESPAN_SECONDS
from ..core.exceptions import ValidationError
from .keycloak import KeycloakClient, decode_token_claims

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_admin(userinfo: dict, access_token: str) -> bool:
    if str(userinfo.get("isAdmin", "")).lower() == "true":
        return True
    claims = decode_token_claims(access_token)
    roles = claims.get("resource_access", {}).get("realm-management", {}).get("roles", [])
    return "realm-admin" in roles


def generate_username(first_name: str, last_name: str) -> str:
    first = re.sub(r"[^a-z0-9]", "", first_name.lower())
    last = re.sub(r"[^a-z0-9]", "", last_name.lower())
    return f"{first[:1]}{last}"


def split_full_name(full_name: str) -> tuple[str, str]:
    first, _, last = full_name.strip().partition(" ")
    last = last.strip()
    if not first or not last:
        raise ValidationError("Full name must include both first and last name")
    return first, last


class AuthService:
    def __init__(self, client: KeycloakClient):
        self._client = client

    def login(self, username: Any, password: Any) -> dict:
        """Authenticate against the identity provider and return the session user."""

        user = require_non_empty(username, "username")
        tokens = self._client.password_grant(user, require_non_empty(password, "password"))
        access_token = tokens["access_token"]
        info = self._client.userinfo(access_token)

        session_user = {
            "id": info.get("sub"),
            "name": info.get("name") or info.get("preferred_username") or user,
            "email": info.get("email"),
            "isAdmin": is_admin(info, access_token),
        }
        logger.info("User %s signed in (admin=%s)", user, session_user["isAdmin"])
        return session_user


class UserAdminService:
    def __init__(self, client: KeycloakClient):
        self._client = client

    def list_users(self) -> list[dict]:
        return [
            {
                "id": u.get("id"),
                "username": u.get("username"),
                "firstName": u.get("firstName"),
                "lastName": u.get("lastName"),
                "email": u.get("email"),
                "role": (u.get("attributes", {}).get("role") or [None])[0],
            }
            for u in self._client.list_users()
        ]

    def create_employee(self, *, full_name: Any, email: Any, role: Any = None) -> dict:
        first, last = split_full_name(require_non_empty(full_name, "fullName"))
        address = require_non_empty(email, "email")
        if not _EMAIL.match(address):
            raise ValidationError("email is not a valid address")

        username = generate_username(first, last)
        if not username:
            raise ValidationError("Could not derive a username from the full name")

        user_id = self._client.create_user(
            {
                "username": username,
                "email": address,
                "enabled": True,
                "firstName": first,
                "lastName": last,
                "attributes": {"role": [str(role or "employee")]},
            }
        )
        if user_id:
            self._client.execute_actions_email(user_id, ["UPDATE_PASSWORD"])

        logger.info("Created employee account %s", username)
        return {"userId": user_id, "username": username}

    def delete_user(self, user_id: str) -> None:
        self._client.delete_user(require_non_empty(user_id, "userId"))
        logger.info("Deleted user %s", user_id)

    def reset_password(self, user_id: str) -> None:
        self._client.execute_actions_email(
            require_non_empty(user_id, "userId"),
            ["UPDATE_PASSWORD"],
            lifespan=RESET_PASSWORD_LIFESPAN_SECONDS,
        )
        logger.info("Password reset email requested for user %s", user_id)

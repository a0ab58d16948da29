"""Session guards for JSON endpoints.

The signed-in user is stored in the Flask session under ``"user"`` as
``{"id", "name", "email", "isAdmin"}``.
"""
from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import session

from ..core.exceptions import AuthenticationError, AuthorizationError

SESSION_KEY = "user"


def current_user() -> Optional[dict]:
    return session.get(SESSION_KEY)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_user():
            raise AuthenticationError("Unauthorized")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if not user:
            raise AuthenticationError("Unauthorized")
        if not user.get("isAdmin"):
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper

import base64
import json

import pytest

from meeting_checkin.core.constants import RESET_PASSWORD_LIFESPAN_SECONDS
from meeting_checkin.core.exceptions import AuthenticationError, ValidationError
from meeting_checkin.identity.service import (
    AuthService,
    UserAdminService,
    generate_username,
    is_admin,
    split_full_name,
)


def _jwt(claims: dict) -> str:
    payload = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip("=")
    return f"h.{payload}.s"


def test_is_admin_from_attribute_or_realm_role():
    assert is_admin({"isAdmin": "true"}, "x.y.z") is True
    token = _jwt({"resource_access": {"realm-management": {"roles": ["view-users", "realm-admin"]}}})
    assert is_admin({}, token) is True
    assert is_admin({"isAdmin": "false"}, _jwt({})) is False


def test_generate_username():
    assert generate_username("Jane", "O'Neil-Smith") == "joneilsmith"


def test_split_full_name():
    assert split_full_name("  Mary Ann Jones ") == ("Mary", "Ann Jones")
    with pytest.raises(ValidationError):
        split_full_name("Cher")


def test_login_returns_session_user(keycloak_client):
    user = AuthService(keycloak_client).login("jdoe", "secret")

    assert user == {"id": "u-1", "name": "Jane Doe", "email": "jdoe@example.com", "isAdmin": True}


def test_login_requires_credentials(keycloak_client):
    with pytest.raises(ValidationError):
        AuthService(keycloak_client).login("", "secret")
    with pytest.raises(AuthenticationError):
        AuthService(keycloak_client).login("jdoe", "wrong")


def test_list_users_shapes_rows(keycloak_client):
    [user] = UserAdminService(keycloak_client).list_users()

    assert user["role"] == "admin"
    assert user["firstName"] == "Jane"


def test_create_employee_sends_setup_email(keycloak_client, keycloak_stub):
    result = UserAdminService(keycloak_client).create_employee(
        full_name="Sam Smith", email="sam@example.com", role="staff"
    )

    assert result == {"userId": "u-2", "username": "ssmith"}
    created = next(r for r in keycloak_stub.requests if r.method == "POST" and r.url.path.endswith("/users"))
    body = json.loads(created.content)
    assert body["attributes"] == {"role": ["staff"]}
    assert body["lastName"] == "Smith"
    actions = keycloak_stub.requests[-1]
    assert actions.url.path.endswith("/users/u-2/execute-actions-email")
    assert json.loads(actions.content) == ["UPDATE_PASSWORD"]


def test_create_employee_validates_email(keycloak_client):
    with pytest.raises(ValidationError):
        UserAdminService(keycloak_client).create_employee(full_name="Sam Smith", email="not-an-email")


def test_reset_password_uses_twelve_hour_link(keycloak_client, keycloak_stub):
    UserAdminService(keycloak_client).reset_password("u-1")

    request = keycloak_stub.requests[-1]
    assert request.method == "PUT"
    assert request.url.params["lifespan"] == str(RESET_PASSWORD_LIFESPAN_SECONDS)


def test_delete_user(keycloak_client, keycloak_stub):
    UserAdminService(keycloak_client).delete_user("u-1")

    assert keycloak_stub.requests[-1].method == "DELETE"

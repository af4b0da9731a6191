import json

import pytest

from storefront.client.session import USER_KEY, Action, LocalStore, Session, authorize
from storefront.domain.models.user import User


def user(role):
    return User(id=f"{role}-1", name=role, email=f"{role}@sonko.tz", role=role)


@pytest.mark.parametrize("action", list(Action))
def test_guest_is_denied_everything(action):
    decision = authorize(user("guest"), action)
    assert not decision
    assert decision.reason == "Sign in to continue"


@pytest.mark.parametrize("action", list(Action))
def test_admin_is_allowed_everything(action):
    assert authorize(user("admin"), action)


@pytest.mark.parametrize("role", ["user", "customer"])
def test_signed_in_non_admin(role):
    assert authorize(user(role), Action.OPEN_ADMIN)
    assert authorize(user(role), Action.VIEW_STATS)
    denied = authorize(user(role), Action.CREATE_PRODUCT)
    assert not denied
    assert denied.reason == "Admin role required"


def test_no_user_is_denied():
    assert not authorize(None, Action.OPEN_ADMIN)


def test_first_session_persists_a_guest(state_path):
    session = Session(LocalStore(state_path))
    assert session.user.is_guest
    assert session.user.id.startswith("guest_")

    with open(state_path, encoding="utf-8") as f:
        stored = json.load(f)
    assert list(stored) == [USER_KEY]
    assert Session(LocalStore(state_path)).user.id == session.user.id


def test_sign_in_and_out(state_path):
    session = Session(LocalStore(state_path))
    session.sign_in(user("admin"))
    assert Session(LocalStore(state_path)).user.is_admin

    guest = session.sign_out()
    assert guest.is_guest
    assert Session(LocalStore(state_path)).user.id == guest.id


def test_corrupt_state_file_falls_back_to_guest(state_path):
    with open(state_path, "w", encoding="utf-8") as f:
        f.write("{not json")
    assert Session(LocalStore(state_path)).user.is_guest


def test_invalid_stored_user_falls_back_to_guest(state_path):
    LocalStore(state_path).set(USER_KEY, {"id": "x", "role": "wizard"})
    assert Session(LocalStore(state_path)).user.is_guest

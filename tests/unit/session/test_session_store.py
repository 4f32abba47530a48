"""
Tests for SessionStore: credential boundary, login and role checks.
"""

import logging

import pytest

from session import CredentialPair, InvalidSessionError, SessionStore

USER = {"id": 1, "username": "admin", "role": "Admin"}


def logged_in(role="Admin") -> SessionStore:
    store = SessionStore()
    store.login({"user": {**USER, "role": role}, "accessToken": "A1", "refreshToken": "R1"})
    return store


class TestCredentialBoundary:

    def test_empty_store(self) -> None:
        store = SessionStore()
        assert store.read() == CredentialPair(None, None)
        assert store.is_logged_in() is False

    def test_replace_keeps_refresh_token_when_omitted(self) -> None:
        store = logged_in()
        store.replace("A2")
        assert store.read() == CredentialPair("A2", "R1")

    def test_replace_with_rotated_refresh_token(self) -> None:
        store = logged_in()
        store.replace("A2", "R2")
        assert store.read() == CredentialPair("A2", "R2")

    @pytest.mark.parametrize("token", ["", None, 123])
    def test_replace_rejects_invalid_access_token(self, token) -> None:
        store = logged_in()
        store.replace(token)
        assert store.read() == CredentialPair("A1", "R1")

    def test_clear_resets_everything_and_notifies(self) -> None:
        store = logged_in()
        calls = []
        remove = store.add_logout_listener(lambda: calls.append("first"))
        store.add_logout_listener(lambda: calls.append("second"))

        store.clear()

        assert calls == ["first", "second"]
        assert store.read() == CredentialPair(None, None)
        assert store.user is None
        assert store.is_authenticated is False

        remove()
        store.clear()
        assert calls == ["first", "second", "second"]

    def test_failing_logout_listener_is_logged_and_skipped(self, caplog) -> None:
        store = logged_in()
        calls = []

        def broken():
            raise RuntimeError("listener blew up")

        store.add_logout_listener(broken)
        store.add_logout_listener(lambda: calls.append("after"))

        with caplog.at_level(logging.ERROR, logger="session.store"):
            store.clear()

        assert calls == ["after"]
        assert store.read() == CredentialPair(None, None)
        assert "Logout listener failed" in caplog.text


class TestLogin:

    def test_login_with_payload(self) -> None:
        store = logged_in()
        assert store.is_logged_in() is True
        assert store.user["username"] == "admin"

    def test_login_with_token_alias(self) -> None:
        store = SessionStore()
        store.login({"user": USER, "token": "A1", "refreshToken": "R1"})
        assert store.read().access_token == "A1"

    def test_login_with_separate_arguments(self) -> None:
        store = SessionStore()
        store.login(USER, "A1", "R1")
        assert store.read() == CredentialPair("A1", "R1")

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {"accessToken": "A1", "refreshToken": "R1"},
            {"user": USER, "refreshToken": "R1"},
            {"user": USER, "accessToken": "A1"},
        ],
    )
    def test_incomplete_login_is_rejected(self, payload) -> None:
        store = SessionStore()
        with pytest.raises(InvalidSessionError):
            store.login(payload)
        assert store.is_logged_in() is False

    def test_extra_user_fields_are_kept(self) -> None:
        store = SessionStore()
        store.login({**USER, "branch_id": 4}, "A1", "R1")
        assert store.user["branch_id"] == 4

    def test_set_user_merges(self) -> None:
        store = logged_in()
        store.set_user({"full_name": "New Name"})
        assert store.user["full_name"] == "New Name"
        assert store.user["username"] == "admin"

    def test_set_user_without_session_is_ignored(self) -> None:
        store = SessionStore()
        store.set_user({"full_name": "Nobody"})
        assert store.user is None


class TestRoles:

    def test_get_role_is_lowercase(self) -> None:
        assert logged_in("SuperAdmin").get_role() == "superadmin"
        assert SessionStore().get_role() is None

    def test_has_role(self) -> None:
        store = logged_in("Admin")
        assert store.has_role("admin") is True
        assert store.has_role(["teacher", "ADMIN"]) is True
        assert store.has_role("superadmin") is False

    @pytest.mark.parametrize(
        "role, minimum, expected",
        [
            ("superadmin", "admin", True),
            ("admin", "admin", True),
            ("teacher", "admin", False),
            ("admin", "teacher", True),
            ("guest", "teacher", False),
            ("superadmin", "owner", False),
        ],
    )
    def test_has_permission(self, role, minimum, expected) -> None:
        assert logged_in(role).has_permission(minimum) is expected

    def test_no_user_has_no_permission(self) -> None:
        assert SessionStore().has_permission("teacher") is False

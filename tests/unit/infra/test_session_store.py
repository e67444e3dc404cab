"""Unit tests for session store implementations."""

import json
import os
import stat

import pytest

from parking_admin.infra.session.store import (
    FileSessionStore,
    InMemorySessionStore,
    SessionStore,
    SessionStoreError,
)


class TestSessionStoreInterface:
    """Tests for SessionStore abstract interface."""

    def test_session_store_is_abstract(self) -> None:
        """SessionStore cannot be instantiated directly."""
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            SessionStore()  # type: ignore


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore."""

    def test_token_and_user_roundtrip(self) -> None:
        store = InMemorySessionStore()

        store.set_token("abc")
        store.set_user({"email": "admin@example.com"})

        assert store.get_token() == "abc"
        assert store.get_user() == {"email": "admin@example.com"}

    def test_clear_removes_token_and_user(self) -> None:
        store = InMemorySessionStore(token="abc", user={"email": "admin@example.com"})

        store.clear()

        assert store.get_token() is None
        assert store.get_user() is None

    def test_remove_is_noop_when_absent(self) -> None:
        store = InMemorySessionStore()

        store.remove_token()
        store.remove_user()

        assert store.get_token() is None

    def test_redirect_to_login(self) -> None:
        routes: list[str] = []
        store = InMemorySessionStore(login_route="/admin/login", on_redirect=routes.append)

        assert store.redirected_to is None

        store.redirect_to_login()

        assert store.redirected_to == "/admin/login"
        assert routes == ["/admin/login"]

    def test_redirect_without_callback(self) -> None:
        store = InMemorySessionStore()

        store.redirect_to_login()

        assert store.redirected_to == "/login"


class TestFileSessionStore:
    """Tests for FileSessionStore."""

    @pytest.fixture
    def path(self, tmp_path):
        return tmp_path / "nested" / "session.json"

    def test_missing_file_is_signed_out(self, path) -> None:
        store = FileSessionStore(path)

        assert store.get_token() is None
        assert store.get_user() is None

    def test_persists_across_instances(self, path) -> None:
        FileSessionStore(path).set_token("abc")
        FileSessionStore(path).set_user({"email": "admin@example.com", "role": "admin"})

        store = FileSessionStore(path)

        assert store.get_token() == "abc"
        assert store.get_user() == {"email": "admin@example.com", "role": "admin"}
        assert json.loads(path.read_text()) == {
            "token": "abc",
            "user": {"email": "admin@example.com", "role": "admin"},
        }

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
    def test_file_is_owner_only(self, path) -> None:
        FileSessionStore(path).set_token("abc")

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_clear(self, path) -> None:
        store = FileSessionStore(path)
        store.set_token("abc")
        store.set_user({"email": "admin@example.com"})

        store.clear()

        assert store.get_token() is None
        assert store.get_user() is None
        assert json.loads(path.read_text()) == {}

    def test_remove_without_file_does_not_create_it(self, path) -> None:
        FileSessionStore(path).remove_token()

        assert not path.exists()

    def test_empty_token_is_signed_out(self, path) -> None:
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"token": ""}))

        assert FileSessionStore(path).get_token() is None

    def test_corrupt_file_raises(self, path) -> None:
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        with pytest.raises(SessionStoreError, match="Failed to read session file"):
            FileSessionStore(path).get_token()

    def test_non_object_file_raises(self, path) -> None:
        path.parent.mkdir(parents=True)
        path.write_text("[1, 2]")

        with pytest.raises(SessionStoreError, match="does not contain an object"):
            FileSessionStore(path).get_user()

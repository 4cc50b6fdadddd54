"""Tests for auth/service.py."""

import json

import pytest

from ecobazaar.modules.auth.exceptions import (
    CorruptedSessionError,
    IncompleteAuthResponseError,
    NotAuthenticatedError,
)
from ecobazaar.modules.auth.interfaces import ISessionManager
from ecobazaar.modules.auth.models import SessionStatus, User
from ecobazaar.modules.auth.service import (
    SessionManager,
    parse_persisted_user,
    session_from_payload,
)
from ecobazaar.shared.exceptions import AuthExpiredError

from conftest import request_json, seed_session


class TestParsePersistedUser:
    def test_valid_record(self):
        user = parse_persisted_user('{"id": 4, "role": "ADMIN"}')
        assert user.id == 4

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"alice"', '{"name": "no id"}'])
    def test_corrupted_records(self, raw):
        with pytest.raises(CorruptedSessionError):
            parse_persisted_user(raw)


class TestSessionFromPayload:
    def test_complete_payload(self, test_user):
        session, raw = session_from_payload({"token": "abc", "user": test_user})
        assert session.token == "abc"
        assert session.user.id == 1
        assert raw is test_user

    @pytest.mark.parametrize(
        "payload",
        [{"user": {"id": 1}}, {"token": "abc"}, {"token": "", "user": {"id": 1}}, None, "ok"],
    )
    def test_incomplete_payloads(self, payload):
        with pytest.raises(IncompleteAuthResponseError) as exc_info:
            session_from_payload(payload)
        assert exc_info.value.message == "Login failed - no token received"

    def test_invalid_user(self):
        with pytest.raises(IncompleteAuthResponseError):
            session_from_payload({"token": "abc", "user": {"name": "no id"}})


class TestRestore:
    def test_implements_protocol(self, session):
        assert isinstance(session, ISessionManager)

    @pytest.mark.asyncio
    async def test_restores_persisted_session(self, session, signed_in):
        """Token plus a well-formed user should restore as authenticated."""
        assert session.loading is True

        state = await session.restore()

        assert state.status is SessionStatus.AUTHENTICATED
        assert state.is_authenticated is True
        assert state.loading is False
        assert session.user.id == 1
        assert session.token == "t1"

    @pytest.mark.asyncio
    async def test_no_persisted_data(self, session):
        state = await session.restore()

        assert state.status is SessionStatus.ANONYMOUS
        assert state.user is None

    @pytest.mark.asyncio
    async def test_token_without_user_is_anonymous(self, session, storage, settings):
        storage.set_item(settings.token_storage_key, "t1")

        state = await session.restore()

        assert state.status is SessionStatus.ANONYMOUS

    @pytest.mark.asyncio
    async def test_corrupted_user_is_purged(self, session, storage, settings, store):
        """A corrupted user record should be removed and never surfaced."""
        seed_session(storage, settings, "t1", "{broken")

        state = await session.restore()

        assert state.status is SessionStatus.ANONYMOUS
        assert store.read() == (None, None)

    @pytest.mark.asyncio
    async def test_runs_once(self, session, signed_in, store):
        await session.restore()
        store.clear()

        state = await session.restore()

        assert state.is_authenticated is True

    @pytest.mark.asyncio
    async def test_wait_ready_after_restore(self, session):
        await session.restore()
        await session.wait_ready()
        assert session.started is True


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_persists_session(self, session, backend, storage, settings, test_user):
        """Successful login stores the token and the user exactly as sent."""
        backend.on("POST", "/auth/login", (200, {"token": "abc", "user": test_user}))

        result = await session.login("a@x.com", "pw")

        assert result.success is True
        assert result.data.id == 1
        assert session.is_authenticated is True
        assert storage.get_item(settings.token_storage_key) == "abc"
        assert storage.get_item(settings.user_storage_key) == json.dumps(test_user)
        assert request_json(backend.requests[0]) == {"email": "a@x.com", "password": "pw"}

    @pytest.mark.asyncio
    async def test_bad_credentials_surface_server_message(self, session, backend, store):
        backend.on("POST", "/auth/login", (401, {"error": "Invalid credentials"}))

        result = await session.login("a@x.com", "wrong")

        assert result.success is False
        assert result.error == "Invalid credentials"
        assert store.token is None
        assert session.is_authenticated is False

    @pytest.mark.asyncio
    async def test_missing_token(self, session, backend, store):
        backend.on("POST", "/auth/login", (200, {"user": {"id": 1}}))

        result = await session.login("a@x.com", "pw")

        assert result.success is False
        assert result.error == "Login failed - no token received"
        assert store.read() == (None, None)

    @pytest.mark.asyncio
    async def test_server_error_uses_generic_message(self, session, backend):
        backend.on("POST", "/auth/login", (500, {"error": "stack trace"}))

        result = await session.login("a@x.com", "pw")

        assert result.error == "Login failed"

    @pytest.mark.asyncio
    async def test_login_notifies_listeners(self, session, backend, test_user):
        seen = []
        session.subscribe(seen.append)
        backend.on("POST", "/auth/login", (200, {"token": "abc", "user": test_user}))

        await session.login("a@x.com", "pw")

        assert [u.id for u in seen] == [1]

    @pytest.mark.asyncio
    async def test_login_unblocks_waiters(self, session, backend, test_user):
        backend.on("POST", "/auth/login", (200, {"token": "abc", "user": test_user}))

        await session.login("a@x.com", "pw")
        await session.wait_ready()

        assert session.status is SessionStatus.AUTHENTICATED


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_with_token_signs_in(self, session, backend, store):
        backend.on("POST", "/auth/register", (200, {"token": "r1", "user": {"id": 9, "role": "SELLER"}}))

        result = await session.register({"email": "s@x.com", "password": "pw", "role": "SELLER"})

        assert result.success is True
        assert session.user.id == 9
        assert store.token == "r1"

    @pytest.mark.asyncio
    async def test_register_without_token(self, session, backend, store):
        """Backends that require a separate login return just a message."""
        backend.on("POST", "/auth/register", (201, {"message": "Registered"}))

        result = await session.register({"email": "s@x.com", "password": "pw"})

        assert result.success is True
        assert result.data == {"message": "Registered"}
        assert session.is_authenticated is False
        assert store.token is None

    @pytest.mark.asyncio
    async def test_register_validation_error(self, session, backend):
        backend.on("POST", "/auth/register", (400, {"error": "Email already in use"}))

        result = await session.register({"email": "s@x.com"})

        assert result.error == "Email already in use"


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_clears_everything(self, session, signed_in, store):
        await session.restore()
        seen = []
        session.subscribe(seen.append)

        session.logout()

        assert session.user is None
        assert session.status is SessionStatus.ANONYMOUS
        assert store.read() == (None, None)
        assert seen == [None]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, session, signed_in):
        await session.restore()
        seen = []
        unsubscribe = session.subscribe(seen.append)
        unsubscribe()

        session.logout()

        assert seen == []


class TestForcedTeardown:
    @pytest.mark.asyncio
    async def test_401_clears_in_memory_session(self, session, signed_in, api, backend, navigator):
        await session.restore()
        backend.on("GET", "/cart/1", (401, None))

        with pytest.raises(AuthExpiredError):
            await api.get("/cart/1")

        assert session.user is None
        assert session.status is SessionStatus.ANONYMOUS
        assert navigator.history == ["/login"]


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_merges_and_persists(self, session, signed_in, store):
        await session.restore()

        user = session.update_user({"name": "Alicia"})

        assert user.to_record()["name"] == "Alicia"
        assert session.user.to_record()["name"] == "Alicia"
        assert json.loads(store.raw_user)["name"] == "Alicia"
        assert store.token == "t1"

    def test_requires_session(self, session):
        with pytest.raises(NotAuthenticatedError):
            session.update_user({"name": "x"})

    @pytest.mark.asyncio
    async def test_failed_write_leaves_memory_untouched(self, session, signed_in, storage, settings):
        await session.restore()

        def fail(key, value):
            raise OSError("read-only")

        storage.set_item = fail
        with pytest.raises(OSError):
            session.update_user({"name": "Alicia"})

        assert session.user.to_record()["name"] == "Alice"

    @pytest.mark.asyncio
    async def test_profile_edit_does_not_notify(self, session, signed_in):
        await session.restore()
        seen = []
        session.subscribe(seen.append)

        session.update_user({"name": "Alicia"})

        assert seen == []


class TestAccountRecovery:
    @pytest.mark.asyncio
    async def test_forgot_password(self, session, backend):
        backend.on("POST", "/auth/forgot-password", (200, {"message": "sent"}))

        result = await session.forgot_password("a@x.com")

        assert result.success is True
        assert request_json(backend.requests[0]) == {"email": "a@x.com"}

    @pytest.mark.asyncio
    async def test_forgot_password_failure(self, session, backend):
        backend.on("POST", "/auth/forgot-password", (503, None))

        result = await session.forgot_password("a@x.com")

        assert result.error == "Failed to send reset email. Please try again."

    @pytest.mark.asyncio
    async def test_reset_password(self, session, backend):
        backend.on("POST", "/auth/reset-password", (400, {"error": "Token expired"}))

        result = await session.reset_password("tok", "newpw")

        assert result.error == "Token expired"
        assert request_json(backend.requests[0]) == {"token": "tok", "password": "newpw"}

    @pytest.mark.asyncio
    async def test_validate_token(self, session, backend):
        backend.on("GET", "/auth/validate-token/tok", (200, {"valid": True}))

        result = await session.validate_token("tok")

        assert result.data == {"valid": True}

    @pytest.mark.asyncio
    async def test_allowed_roles(self, session, backend):
        backend.on("GET", "/auth/allowed-roles", (200, {"roles": ["USER", "SELLER"]}))

        assert await session.get_allowed_roles() == ["USER", "SELLER"]

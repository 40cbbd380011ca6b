"""
TIL Backend — Auth Service Unit Tests
======================================

What:  Tests for password hashing, login, and bearer-token resolution.

What we test:
    ✅ Hashes are salted and verify only the hashed password
    ✅ Malformed stored hashes never verify
    ✅ Login issues a distinct token per call
    ✅ Wrong password / unknown user raise UnauthorizedError (Basic scheme)
    ✅ Tokens resolve to their user; unknown tokens raise UnauthorizedError
"""

import pytest

from app.exceptions import UnauthorizedError
from app.schemas.user import UserCreate
from app.services.auth_service import (
    AuthService,
    generate_token_value,
    hash_password,
    verify_password,
)
from app.services.user_service import user_service


class TestPasswordHashing:
    """Tests for hash_password / verify_password."""

    def test_hash_verifies_same_password(self):
        stored = hash_password("s3cret", iterations=1000)

        assert verify_password("s3cret", stored, iterations=1000)
        assert not verify_password("wrong", stored, iterations=1000)

    def test_hash_is_salted(self):
        assert hash_password("s3cret", iterations=1000) != hash_password(
            "s3cret", iterations=1000
        )

    def test_hash_never_contains_password(self):
        assert "s3cret" not in hash_password("s3cret", iterations=1000)

    @pytest.mark.parametrize("stored", ["", "no-separator", "zz$zz", "$"])
    def test_malformed_hash_never_verifies(self, stored):
        assert verify_password("anything", stored, iterations=1000) is False

    def test_tokens_are_unique(self):
        assert len({generate_token_value() for _ in range(50)}) == 50


class TestAuthService:
    """Tests for login and authenticate_token."""

    def setup_method(self):
        self.service = AuthService()

    async def _register(self, db):
        return await user_service.create_user(
            db, UserCreate(name="Alice", username="alice", password="password")
        )

    @pytest.mark.asyncio
    async def test_login_issues_token(self, db_session):
        user = await self._register(db_session)

        token = await self.service.login(db_session, "alice", "password")

        assert token.user_id == user.id
        assert token.token
        assert token.model_dump(by_alias=True)["userID"] == user.id

    @pytest.mark.asyncio
    async def test_each_login_issues_a_new_token(self, db_session):
        await self._register(db_session)

        first = await self.service.login(db_session, "alice", "password")
        second = await self.service.login(db_session, "alice", "password")

        assert first.token != second.token

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username, password",
        [("alice", "wrong"), ("nobody", "password")],
    )
    async def test_bad_credentials_raise_unauthorized(self, db_session, username, password):
        await self._register(db_session)

        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.login(db_session, username, password)
        assert exc_info.value.scheme == "Basic"
        # Same message for both cases
        assert exc_info.value.message == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_token_resolves_to_user(self, db_session):
        user = await self._register(db_session)
        token = await self.service.login(db_session, "alice", "password")

        resolved = await self.service.authenticate_token(db_session, token.token)

        assert resolved.id == user.id

    @pytest.mark.asyncio
    async def test_unknown_token_raises_unauthorized(self, db_session):
        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.authenticate_token(db_session, "not-a-token")
        assert exc_info.value.scheme == "Bearer"

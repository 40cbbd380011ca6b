"""
TIL Backend — Auth Service (Passwords & Bearer Tokens)
=======================================================

What:  Password hashing, login, and bearer-token resolution.
How:   Passwords are stored as PBKDF2-HMAC-SHA256 digests with a random
       16-byte salt ("<salt hex>$<digest hex>"). Login checks a username and
       password and writes a Token row holding random bytes, base64-encoded.
       Protected routes resolve that token back to its User.
Who:   UserService (hashing on registration), the login route, and the
       `require_user` dependency in app/security.py.

Flow:
    POST /api/users/login  (Authorization: Basic base64(username:password))
        → login() → Token {id, token, userID}
    POST /api/acronyms/    (Authorization: Bearer <token>)
        → authenticate_token() → User → handler runs
"""

import asyncio
import base64
import hashlib
import hmac
import logging
import os

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import DatabaseError, UnauthorizedError
from app.models.token import Token
from app.models.user import User
from app.schemas.user import TokenResponse

logger = logging.getLogger(__name__)


def hash_password(password: str, iterations: int | None = None) -> str:
    """
    Hash a password with PBKDF2-HMAC-SHA256 and a fresh random salt.

    Returns:
        "<salt hex>$<digest hex>"; verify_password() reads the same format.
    """
    rounds = iterations or settings.password_hash_iterations
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, stored_hash: str, iterations: int | None = None) -> bool:
    """
    Check `password` against a hash produced by hash_password().

    Malformed stored values never match.
    """
    rounds = iterations or settings.password_hash_iterations
    try:
        salt_hex, digest_hex = stored_hash.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    # Constant-time comparison
    return hmac.compare_digest(digest, expected)


def generate_token_value() -> str:
    """Random bearer token: `settings.token_bytes` random bytes, base64-encoded."""
    return base64.b64encode(os.urandom(settings.token_bytes)).decode("ascii")


class AuthService:
    """
    Login and token lookup.

    Both methods raise UnauthorizedError rather than NotFoundError for unknown
    users or tokens, so responses do not reveal which usernames exist.
    """

    async def login(self, db: AsyncSession, username: str, password: str) -> TokenResponse:
        """
        Verify credentials and issue a new token.

        Raises:
            UnauthorizedError: Unknown username or wrong password (→ 401, Basic challenge)
            DatabaseError: Query or insert failed (→ 500)
        """
        try:
            result = await db.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user '%s': %s", username, str(e))
            raise DatabaseError(
                message="Could not log in. Please try again.",
                context={"error_type": type(e).__name__},
            )

        # PBKDF2 is CPU-bound; keep it off the event loop
        valid = user is not None and await asyncio.to_thread(
            verify_password, password, user.password_hash
        )
        if not valid:
            logger.info("Failed login for username '%s'", username)
            raise UnauthorizedError(message="Invalid username or password", scheme="Basic")

        token = Token(token=generate_token_value(), user_id=user.id)
        try:
            db.add(token)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error issuing token for user %s: %s", user.id, str(e))
            raise DatabaseError(
                message="Could not log in. Please try again.",
                context={"user_id": str(user.id)},
            )

        logger.info("Issued token %s for user %s", token.id, user.id)
        return TokenResponse.model_validate(token)

    async def authenticate_token(self, db: AsyncSession, token_value: str) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            UnauthorizedError: No such token, or its user no longer exists (→ 401)
            DatabaseError: Query failed (→ 500)
        """
        try:
            result = await db.execute(
                select(User)
                .join(Token, Token.user_id == User.id)
                .where(Token.token == token_value)
            )
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error resolving bearer token: %s", str(e))
            raise DatabaseError(
                message="Could not verify credentials. Please try again.",
                context={"error_type": type(e).__name__},
            )

        if user is None:
            raise UnauthorizedError(message="Invalid or expired token")
        return user


auth_service = AuthService()

"""Credential service: password hashing and session tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Protocol

import bcrypt
import jwt

from tutorlink.auth.exceptions import InvalidTokenError

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


class Role(StrEnum):
    """Who a session token was issued to."""

    TUTOR = "tutor"
    STUDENT = "student"


@dataclass(frozen=True)
class TokenClaims:
    """Decoded session token."""

    subject: str
    role: Role
    expires_at: datetime


class CredentialService(Protocol):
    """Interface the account directory uses at registration and login."""

    def hash(self, password: str) -> str:
        """Hash a plaintext password."""
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored hash."""
        ...

    def issue_token(self, identity: str, role: Role) -> str:
        """Issue a session token for an account."""
        ...

    def decode_token(self, token: str) -> TokenClaims:
        """Validate a session token and return its claims."""
        ...


class BcryptJWTCredentials:
    """bcrypt password hashes and HS256 JWT session tokens."""

    def __init__(
        self,
        secret: str,
        token_ttl_minutes: int = 60 * 24,
        rounds: int = 12,
        algorithm: str = "HS256",
    ) -> None:
        self._secret = secret
        self._ttl = timedelta(minutes=token_ttl_minutes)
        self._rounds = rounds
        self._algorithm = algorithm

    def hash(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds))
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Stored hash is corrupted, or the password is over bcrypt's limit
            return False

    def issue_token(self, identity: str, role: Role) -> str:
        expires_at = datetime.now(UTC) + self._ttl
        payload = {"sub": identity, "role": role.value, "exp": expires_at}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenClaims:
        """Validate a token.

        Raises:
            InvalidTokenError: If the token is expired, forged or lacks claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

        try:
            role = Role(payload.get("role"))
        except ValueError as e:
            raise InvalidTokenError("Invalid token") from e

        return TokenClaims(
            subject=str(payload["sub"]),
            role=role,
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )

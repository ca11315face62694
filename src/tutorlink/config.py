"""Runtime configuration for TutorLink."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_DB_PATH = "tutorlink.db"
DEFAULT_TOKEN_TTL_MINUTES = 60 * 24
DEFAULT_BCRYPT_ROUNDS = 12
DEFAULT_CODE_MAX_ATTEMPTS = 32
MIN_JWT_SECRET_LENGTH = 32


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class Settings:
    """TutorLink settings.

    Attributes:
        jwt_secret: HMAC secret used to sign session tokens.
        db_path: Path to the SQLite database file, or ":memory:".
        token_ttl_minutes: Lifetime of issued session tokens.
        bcrypt_rounds: bcrypt cost factor (4-31).
        code_max_attempts: Retry cap for tutor/course code allocation.
    """

    jwt_secret: str
    db_path: str = DEFAULT_DB_PATH
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    code_max_attempts: int = DEFAULT_CODE_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if len(self.jwt_secret) < MIN_JWT_SECRET_LENGTH:
            raise ConfigError(
                f"JWT secret must be at least {MIN_JWT_SECRET_LENGTH} characters"
            )
        if self.token_ttl_minutes <= 0:
            raise ConfigError("Token TTL must be positive")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigError("bcrypt rounds must be between 4 and 31")
        if self.code_max_attempts <= 0:
            raise ConfigError("Code max attempts must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Load settings from TUTORLINK_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If the JWT secret is missing or a value is invalid.
        """
        env = os.environ if environ is None else environ

        secret = env.get("TUTORLINK_JWT_SECRET")
        if not secret:
            raise ConfigError("TUTORLINK_JWT_SECRET is not set")

        return cls(
            jwt_secret=secret,
            db_path=env.get("TUTORLINK_DB_PATH", DEFAULT_DB_PATH),
            token_ttl_minutes=_int_from_env(
                env, "TUTORLINK_TOKEN_TTL_MINUTES", DEFAULT_TOKEN_TTL_MINUTES
            ),
            bcrypt_rounds=_int_from_env(env, "TUTORLINK_BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS),
            code_max_attempts=_int_from_env(
                env, "TUTORLINK_CODE_MAX_ATTEMPTS", DEFAULT_CODE_MAX_ATTEMPTS
            ),
        )


def _int_from_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e

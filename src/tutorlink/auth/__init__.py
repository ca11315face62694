"""Auth - credential service contract and its bcrypt/JWT implementation."""

from tutorlink.auth.credentials import (
    MAX_PASSWORD_BYTES,
    BcryptJWTCredentials,
    CredentialService,
    Role,
    TokenClaims,
)
from tutorlink.auth.exceptions import InvalidTokenError

__all__ = [
    "MAX_PASSWORD_BYTES",
    "BcryptJWTCredentials",
    "CredentialService",
    "InvalidTokenError",
    "Role",
    "TokenClaims",
]

"""Security utilities for password hashing and JWT token management."""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

# Password hashing with Argon2
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TOKEN_LIFETIME = timedelta(days=7)


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be verified.

    Covers bad signatures, malformed payloads and expired tokens alike so
    callers cannot tell a forged token from an expired one.
    """


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Password to verify
        hashed_password: Stored password hash

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


@lru_cache
def dummy_password_hash() -> str:
    """Hash checked against when no user matches, so both login failures cost one Argon2 verify."""
    return hash_password("dummy-password-for-timing")


class TokenService:
    """Issues and verifies stateless, signed bearer tokens.

    Tokens are never stored server side. A token stays valid until its
    ``exp`` claim passes; there is no revocation.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = DEFAULT_ALGORITHM,
        expires_delta: timedelta = DEFAULT_TOKEN_LIFETIME,
    ):
        """
        Initialize the token service.

        Args:
            secret: Server-held signing secret
            algorithm: JWT signing algorithm
            expires_delta: Lifetime of issued tokens

        Raises:
            ValueError: If the secret is empty
        """
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, user_id: UUID) -> str:
        """
        Create a signed token bound to a user.

        Args:
            user_id: User ID to encode in token

        Returns:
            Encoded JWT token string
        """
        issued_at = datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> UUID:
        """
        Verify a token and return the user ID it was issued for.

        Args:
            token: JWT token string

        Returns:
            User ID as UUID

        Raises:
            InvalidTokenError: If the signature, payload or expiry check fails
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        user_id_str = payload.get("sub")
        if not isinstance(user_id_str, str):
            raise InvalidTokenError("Token missing 'sub' claim")
        try:
            return UUID(user_id_str)
        except ValueError as exc:
            raise InvalidTokenError("Token 'sub' claim is not a user id") from exc

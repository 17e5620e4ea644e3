from typing import Any

from jose import jwt
from passlib.context import CryptContext

from coursesphere.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SCHEME_PLAINTEXT = "plaintext"
SCHEME_PBKDF2 = "pbkdf2_sha256"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def hash_for_storage(password: str, scheme: str | None = None) -> str:
    """Return the value to store for a password under the configured scheme."""
    scheme = scheme or settings.PASSWORD_SCHEME
    if scheme == SCHEME_PBKDF2:
        return get_password_hash(password)
    return password


def verify_password(plain_password: str, stored: str | None, scheme: str | None = None) -> bool:
    """Check a password against its stored value.

    Stored values are plain text unless the hashing scheme is enabled and
    the stored value is a recognised passlib hash.
    """
    if not isinstance(stored, str) or not stored:
        return False
    scheme = scheme or settings.PASSWORD_SCHEME
    if scheme == SCHEME_PBKDF2 and pwd_context.identify(stored) is not None:
        return pwd_context.verify(plain_password, stored)
    return plain_password == stored


def create_session_token(subject: str) -> str:
    # No "exp" claim: sessions last until logout.
    to_encode: dict[str, Any] = {"sub": subject}
    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
    )

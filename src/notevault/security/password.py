"""Password hashing utilities."""

from typing import Optional

from passlib.context import CryptContext

# bcrypt_sha256 pre-hashes with SHA-256 so long passwords aren't truncated at 72 bytes
pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash. An empty password or hash never matches."""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # stored value isn't a hash this context recognises
        return False

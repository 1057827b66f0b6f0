"""Password hashing helpers (passlib bcrypt)."""

from typing import Optional

from passlib.context import CryptContext

from mindease.config import settings

_pwd_context: Optional[CryptContext] = None


def _context() -> CryptContext:
    # Built on first use so BCRYPT_ROUNDS set by tests or .env is honoured
    global _pwd_context
    if _pwd_context is None:
        _pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )
    return _pwd_context


def _truncate_for_bcrypt(password: str) -> str:
    """Truncate to bcrypt's 72-byte input limit without splitting a UTF-8 sequence."""
    return password.encode("utf-8")[:72].decode("utf-8", "ignore")


def hash_password(password: str) -> str:
    return _context().hash(_truncate_for_bcrypt(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored hash; malformed hashes never match."""
    try:
        return _context().verify(_truncate_for_bcrypt(plain_password), hashed_password)
    except ValueError:
        return False

"""Salted password hashing."""

from passlib.context import CryptContext


class PasswordHasher:
    """Hashes and verifies account passwords with PBKDF2-SHA256.

    Hashes are self-describing (scheme, rounds and salt are embedded), so
    verification needs no extra state.
    """

    def __init__(self) -> None:
        self._context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

    def hash(self, password: str) -> str:
        """Return a salted hash of *password*."""
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check *password* against a stored hash."""
        return self._context.verify(password, password_hash)

"""At-rest protection for Spotify refresh tokens kept on user records."""

from typing import Self

from cryptography.fernet import Fernet, InvalidToken

from beatdrops.settings import AppSettings


class RefreshTokenVault:
    """Seals and opens Spotify refresh tokens with a Fernet key.

    Sealed values are authenticated, so a token written under one key (or
    altered in the database) fails to open rather than yielding garbage.
    """

    def __init__(self, key: str) -> None:
        self._fernet = Fernet(key.encode())

    @classmethod
    def from_settings(cls, settings: AppSettings) -> Self | None:
        """Build a vault from ``TOKEN_ENCRYPTION_KEY``; None when storage is disabled."""
        if not settings.TOKEN_ENCRYPTION_KEY:
            return None
        return cls(settings.TOKEN_ENCRYPTION_KEY)

    def seal(self, refresh_token: str) -> str:
        """Return the encrypted form of *refresh_token*."""
        return self._fernet.encrypt(refresh_token.encode()).decode()

    def open(self, sealed: str) -> str | None:
        """Decrypt a sealed token, or None if it was not sealed with this key."""
        try:
            return self._fernet.decrypt(sealed.encode()).decode()
        except InvalidToken:
            return None

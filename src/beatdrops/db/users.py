"""User persistence: signup, login and the liked-post set."""

import logging

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from beatdrops.auth.passwords import PasswordHasher
from beatdrops.constants import MIN_PASSWORD_LENGTH
from beatdrops.db.errors import translate_store_errors
from beatdrops.db.models import User, UserLikedPost
from beatdrops.errors import FieldError, IncorrectEmail, IncorrectPassword, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email already in use."


class NewUser(BaseModel):
    """Raw signup fields, validated by :meth:`UserRepository.add_user`."""

    username: str = ""
    email: str = ""
    password: str = ""


class UserRepository:
    """Reads and writes users and their liked-post sets."""

    def __init__(self, hasher: PasswordHasher) -> None:
        self._hasher = hasher

    @translate_store_errors
    async def add_user(self, fields: NewUser, session: AsyncSession) -> User:
        """Validate and create a user with a hashed password.

        Raises:
            ValidationFailed: One entry per failing field, including a taken email.
        """
        errors = self._validate(fields)
        email = self._normalize_email(fields.email)

        if not any(e.field == "email" for e in errors) and await self._email_exists(email, session):
            errors.append(FieldError("email", EMAIL_TAKEN))
        if errors:
            raise ValidationFailed(errors)

        user = User(
            username=fields.username.strip(),
            email=email,
            password_hash=self._hasher.hash(fields.password),
            liked_entries=[],
        )
        session.add(user)
        try:
            await session.flush()
        except IntegrityError as exc:
            # A concurrent signup won the unique index.
            await session.rollback()
            raise ValidationFailed([FieldError("email", EMAIL_TAKEN)]) from exc

        logger.info("Created user %d", user.id)
        return user

    @translate_store_errors
    async def login(self, email: str, password: str, session: AsyncSession) -> User:
        """Return the user matching *email* and *password*.

        Raises:
            IncorrectEmail: No user has this email.
            IncorrectPassword: The password does not match.
        """
        result = await session.execute(select(User).where(User.email == self._normalize_email(email)))
        user = result.scalar_one_or_none()
        if user is None:
            raise IncorrectEmail()
        if not self._hasher.verify(password, user.password_hash):
            raise IncorrectPassword()
        return user

    @translate_store_errors
    async def find_user_by_id(self, user_id: int, session: AsyncSession) -> User | None:
        """Return a user by id, or None."""
        return await session.get(User, user_id)

    @translate_store_errors
    async def get_user_liked(self, user_id: int, session: AsyncSession) -> list[int] | None:
        """Return the user's liked post ids, or None if the user does not exist."""
        user = await session.get(User, user_id)
        if user is None:
            return None
        return user.liked

    @translate_store_errors
    async def add_user_liked(self, user_id: int, post_id: int, session: AsyncSession) -> User:
        """Add *post_id* to the user's liked set. Adding a present id is a no-op.

        Raises:
            NotFound: If the user does not exist.
        """
        user = await self._require_user(user_id, session)
        if post_id not in user.liked:
            user.liked_entries.append(UserLikedPost(post_id=post_id))
            await session.flush()
        return user

    @translate_store_errors
    async def remove_user_liked(self, user_id: int, post_id: int, session: AsyncSession) -> User:
        """Remove *post_id* from the user's liked set. Removing an absent id is a no-op.

        Raises:
            NotFound: If the user does not exist.
        """
        user = await self._require_user(user_id, session)
        for entry in user.liked_entries:
            if entry.post_id == post_id:
                user.liked_entries.remove(entry)
                await session.flush()
                break
        return user

    @translate_store_errors
    async def update_refresh(self, user_id: int, encrypted_token: str, session: AsyncSession) -> User | None:
        """Store an encrypted Spotify refresh token for the user. Returns None if absent."""
        user = await session.get(User, user_id)
        if user is None:
            return None
        user.encrypted_spotify_refresh_token = encrypted_token
        await session.flush()
        return user

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.strip().lower()

    @staticmethod
    def _validate(fields: NewUser) -> list[FieldError]:
        errors: list[FieldError] = []
        if not fields.username.strip():
            errors.append(FieldError("username", "Please enter a username."))
        if not fields.email.strip():
            errors.append(FieldError("email", "Please enter an email."))
        else:
            try:
                validate_email(fields.email.strip(), check_deliverability=False)
            except EmailNotValidError:
                errors.append(FieldError("email", "Please enter a valid email."))
        if not fields.password:
            errors.append(FieldError("password", "Please enter a password."))
        elif len(fields.password) < MIN_PASSWORD_LENGTH:
            errors.append(
                FieldError("password", f"Minimum password length is {MIN_PASSWORD_LENGTH} characters.")
            )
        return errors

    @staticmethod
    async def _email_exists(email: str, session: AsyncSession) -> bool:
        result = await session.execute(select(func.count()).select_from(User).where(User.email == email))
        return result.scalar_one() > 0

    @staticmethod
    async def _require_user(user_id: int, session: AsyncSession) -> User:
        user = await session.get(User, user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

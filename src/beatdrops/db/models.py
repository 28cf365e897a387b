"""Post and user models."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from beatdrops.db.base import Base, BigIntId, utc_now


class Post(Base):
    """A song post resolved from the Spotify catalog."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    artist: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(512), nullable=False)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location: Mapped[str | None] = mapped_column(String(255))
    image_url: Mapped[str | None] = mapped_column(String(512))
    uri: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),)


class User(Base):
    """Registered account. Liked posts are stored on the user side only."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    encrypted_spotify_refresh_token: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    # Relationships
    liked_entries: Mapped[list["UserLikedPost"]] = relationship(
        "UserLikedPost",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="UserLikedPost.created_at",
    )

    @property
    def liked(self) -> list[int]:
        """Ids of the posts this user has liked, oldest first."""
        return [entry.post_id for entry in self.liked_entries]


class UserLikedPost(Base):
    """One entry of a user's liked-post set.

    ``post_id`` has no foreign key: the liked set is not checked against the
    posts table.
    """

    __tablename__ = "user_liked_posts"

    user_id: Mapped[int] = mapped_column(BigIntId, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    post_id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="liked_entries")

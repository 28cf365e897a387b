"""Database package: convenience re-exports.

Importing this module registers all models with Base.metadata.
"""

from beatdrops.db.base import Base
from beatdrops.db.models import Post, User, UserLikedPost
from beatdrops.db.posts import PostRepository, PostSort
from beatdrops.db.session import DatabaseManager
from beatdrops.db.users import NewUser, UserRepository

__all__ = [
    "Base",
    "DatabaseManager",
    "NewUser",
    "Post",
    "PostRepository",
    "PostSort",
    "User",
    "UserLikedPost",
    "UserRepository",
]

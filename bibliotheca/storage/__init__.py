"""
Storage Module for Bibliotheca

Persistent storage on MongoDB:
- Database handle and named collections
- Stored entity data classes
- Per-entity repositories (books with lending, users, genres, comments)
"""

from bibliotheca.storage.mongo import (
    MongoDatabase,
    BOOKS,
    USERS,
    GENRES,
    COMMENTS,
)
from bibliotheca.storage.models import (
    StoredBook,
    StoredUser,
    StoredGenre,
    StoredComment,
)
from bibliotheca.storage.book_repository import BookRepository
from bibliotheca.storage.user_repository import UserRepository
from bibliotheca.storage.genre_repository import GenreRepository
from bibliotheca.storage.comment_repository import CommentRepository

__all__ = [
    # Database
    "MongoDatabase",
    "BOOKS",
    "USERS",
    "GENRES",
    "COMMENTS",
    # Models
    "StoredBook",
    "StoredUser",
    "StoredGenre",
    "StoredComment",
    # Repositories
    "BookRepository",
    "UserRepository",
    "GenreRepository",
    "CommentRepository",
]

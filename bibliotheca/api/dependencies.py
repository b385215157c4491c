"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- The database handle
- Repository instances
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends

from bibliotheca.storage import (
    BookRepository,
    CommentRepository,
    GenreRepository,
    MongoDatabase,
    UserRepository,
)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "bibliotheca"
    mongo_timeout_ms: int = 5000

    # Server
    port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            mongo_url=os.getenv("URL_MONGO", cls.mongo_url),
            db_name=os.getenv("DB_NAME", cls.db_name),
            mongo_timeout_ms=int(os.getenv("MONGO_TIMEOUT_MS", cls.mongo_timeout_ms)),
            port=int(os.getenv("PORT", cls.port)),
            environment=os.getenv("BIBLIOTHECA_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container
# =============================================================================

class ServiceContainer:
    """
    Container for lazily built database handle and repositories.

    Nothing touches the network until a repository is first used.
    """

    def __init__(self, settings: Settings, database: Optional[MongoDatabase] = None):
        self.settings = settings
        self._database = database
        self._book_repository = None
        self._user_repository = None
        self._genre_repository = None
        self._comment_repository = None

    @property
    def database(self) -> MongoDatabase:
        """Get database handle."""
        if self._database is None:
            self._database = MongoDatabase(
                self.settings.mongo_url,
                db_name=self.settings.db_name,
                timeout_ms=self.settings.mongo_timeout_ms,
            )
        return self._database

    @property
    def book_repository(self) -> BookRepository:
        if self._book_repository is None:
            self._book_repository = BookRepository(self.database)
        return self._book_repository

    @property
    def user_repository(self) -> UserRepository:
        if self._user_repository is None:
            self._user_repository = UserRepository(self.database)
        return self._user_repository

    @property
    def genre_repository(self) -> GenreRepository:
        if self._genre_repository is None:
            self._genre_repository = GenreRepository(self.database)
        return self._genre_repository

    @property
    def comment_repository(self) -> CommentRepository:
        if self._comment_repository is None:
            self._comment_repository = CommentRepository(self.database)
        return self._comment_repository


# Global service container
_service_container: Optional[ServiceContainer] = None


def init_services(settings: Settings) -> ServiceContainer:
    """Initialize service container."""
    global _service_container
    _service_container = ServiceContainer(settings)
    return _service_container


def reset_services() -> None:
    """Drop the service container (used on shutdown)."""
    global _service_container
    _service_container = None


def get_service_container() -> ServiceContainer:
    """Get service container instance."""
    if _service_container is None:
        # Auto-initialize with default settings if not explicitly initialized
        return init_services(get_settings())
    return _service_container


# =============================================================================
# Individual Dependencies
# =============================================================================

def get_database(
    container: ServiceContainer = Depends(get_service_container),
) -> MongoDatabase:
    """Dependency for the database handle."""
    return container.database


def get_book_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> BookRepository:
    """Dependency for book repository."""
    return container.book_repository


def get_user_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> UserRepository:
    """Dependency for user repository."""
    return container.user_repository


def get_genre_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> GenreRepository:
    """Dependency for genre repository."""
    return container.genre_repository


def get_comment_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> CommentRepository:
    """Dependency for comment repository."""
    return container.comment_repository

"""
Bibliotheca - FastAPI Backend.

HTTP API for the library catalog.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_service_container,
    ServiceContainer,
)
from .schemas import (
    BookCreate,
    BookUpdate,
    BookResponse,
    BookSearchRequest,
    RatedBookResponse,
    UserCreate,
    UserUpdate,
    UserResponse,
    UserSearchRequest,
    GenreCreate,
    GenreResponse,
    CommentCreate,
    CommentResponse,
    RatingSearchRequest,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_service_container",
    "ServiceContainer",
    # Schemas
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "BookSearchRequest",
    "RatedBookResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSearchRequest",
    "GenreCreate",
    "GenreResponse",
    "CommentCreate",
    "CommentResponse",
    "RatingSearchRequest",
    "HealthResponse",
    "ErrorResponse",
]

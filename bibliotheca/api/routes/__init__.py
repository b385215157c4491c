"""
API Routes for Bibliotheca

Route modules:
- books: Book CRUD, search and lending
- users: User CRUD and search
- genres: Genres and books by genre
- comments: Reviews and ratings
"""

from bibliotheca.api.routes.books import router as books_router
from bibliotheca.api.routes.users import router as users_router
from bibliotheca.api.routes.genres import router as genres_router
from bibliotheca.api.routes.comments import router as comments_router

__all__ = [
    "books_router",
    "users_router",
    "genres_router",
    "comments_router",
]

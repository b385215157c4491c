"""
Genre API Routes
"""

from fastapi import APIRouter, Depends
from loguru import logger

from bibliotheca.api.dependencies import get_genre_repository
from bibliotheca.api.schemas import BookResponse, ErrorResponse, GenreCreate, GenreResponse
from bibliotheca.storage import GenreRepository


router = APIRouter(prefix="/genre", tags=["genres"])


@router.post(
    "",
    response_model=GenreResponse,
    responses={409: {"model": ErrorResponse, "description": "Genre already exists"}},
)
async def create_genre(
    genre: GenreCreate,
    repo: GenreRepository = Depends(get_genre_repository),
):
    """Create a genre."""
    logger.info(f"Creating genre: {genre.name}")
    return await repo.create(genre.name)


@router.get("", response_model=list[GenreResponse])
async def list_genres(repo: GenreRepository = Depends(get_genre_repository)):
    """List every genre."""
    return await repo.list_all()


@router.get("/{name}", response_model=list[BookResponse])
async def list_books_by_genre(
    name: str,
    repo: GenreRepository = Depends(get_genre_repository),
):
    """
    List the books of a genre.

    ``gender_id`` of each book carries the genre name. Unknown names give
    an empty list.
    """
    logger.info(f"Listing books of genre: {name}")
    return await repo.list_books(name)

"""
Comment API Routes

Reviews and the ratings derived from them.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from loguru import logger

from bibliotheca.api.dependencies import get_comment_repository
from bibliotheca.api.schemas import (
    CommentCreate,
    CommentResponse,
    RatedBookResponse,
    RatingSearchRequest,
)
from bibliotheca.storage import CommentRepository


router = APIRouter(prefix="/comment", tags=["comments"])


@router.post("", response_model=CommentResponse)
async def create_comment(
    comment: CommentCreate,
    repo: CommentRepository = Depends(get_comment_repository),
):
    """Post a review of a book."""
    logger.info(f"Creating comment on book {comment.book_id} by user {comment.user_id}")
    return await repo.create(
        user_id=comment.user_id,
        book_id=comment.book_id,
        comment=comment.comment,
        rating=comment.rating,
    )


@router.get("", response_model=list[CommentResponse])
async def list_comments(repo: CommentRepository = Depends(get_comment_repository)):
    """List every comment."""
    return await repo.list_all()


# Two-segment routes first so "/search/rating" never reads as a book id
@router.get("/search/rating", response_model=list[RatedBookResponse])
async def search_books_by_rating(
    request: RatingSearchRequest,
    repo: CommentRepository = Depends(get_comment_repository),
):
    """
    Books whose average rating satisfies a comparison.

    Body: ``{"operator": ">=", "rating": 4}``. Operators are ``=``, ``!=``,
    ``>``, ``>=``, ``<`` and ``<=``. Books without comments never match.
    """
    return await repo.search_books_by_rating(request.operator, request.rating)


@router.get("/rating/{book_id}", response_model=Optional[float])
async def get_book_rating(
    book_id: str,
    repo: CommentRepository = Depends(get_comment_repository),
):
    """Average rating of a book, or null when it has no comment."""
    logger.info(f"Computing rating of book {book_id}")
    return await repo.average_rating(book_id)


@router.get("/user/{user_id}", response_model=list[CommentResponse])
async def list_comments_by_user(
    user_id: str,
    repo: CommentRepository = Depends(get_comment_repository),
):
    """Comments written by a user."""
    return await repo.list_by_user(user_id)


@router.get("/{book_id}", response_model=list[CommentResponse])
async def list_comments_by_book(
    book_id: str,
    repo: CommentRepository = Depends(get_comment_repository),
):
    """Comments on a book."""
    return await repo.list_by_book(book_id)

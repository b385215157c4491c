"""
Book API Routes

CRUD operations for books, exact-match search, and lending
(borrow/return between a book and a user).
"""

from fastapi import APIRouter, Depends
from loguru import logger

from bibliotheca.api.dependencies import get_book_repository
from bibliotheca.api.schemas import (
    BookCreate,
    BookResponse,
    BookSearchRequest,
    BookUpdate,
    ErrorResponse,
    UserResponse,
)
from bibliotheca.storage import BookRepository


router = APIRouter(prefix="/book", tags=["books"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Book not found"}}
LENDING_ERRORS = {
    404: {"model": ErrorResponse, "description": "Book or user not found"},
    409: {"model": ErrorResponse, "description": "Book not in the required state"},
}


# =============================================================================
# CRUD Endpoints
# =============================================================================

@router.post("", response_model=BookResponse)
async def create_book(
    book: BookCreate,
    repo: BookRepository = Depends(get_book_repository),
):
    """Create a book. New books are available and have no genre."""
    logger.info(f"Creating book: {book.title} by {book.author}")
    return await repo.create(
        title=book.title,
        author=book.author,
        year=book.year,
        resume=book.resume,
    )


@router.get("", response_model=list[BookResponse])
async def list_books(repo: BookRepository = Depends(get_book_repository)):
    """List every book."""
    return await repo.list_all()


@router.post("/search", response_model=list[BookResponse])
async def search_books(
    request: BookSearchRequest,
    repo: BookRepository = Depends(get_book_repository),
):
    """Search by exact title, author and/or year. An empty body finds nothing."""
    present = request.present_fields()
    logger.info(f"Searching books: {present}")
    return await repo.search(present)


@router.get("/{book_id}", response_model=BookResponse, responses=NOT_FOUND)
async def get_book(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Get a book by ID."""
    logger.info(f"Fetching book: {book_id}")
    return await repo.get(book_id)


@router.put("/{book_id}", response_model=BookResponse, responses=NOT_FOUND)
async def update_book(
    book_id: str,
    book: BookUpdate,
    repo: BookRepository = Depends(get_book_repository),
):
    """
    Update a book.

    Supports partial updates - only provided fields are modified.
    """
    logger.info(f"Updating book: {book_id}")
    return await repo.update(book_id, book.present_fields())


@router.delete("/{book_id}", response_model=BookResponse, responses=NOT_FOUND)
async def delete_book(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Delete a book and return it as it was."""
    logger.info(f"Deleting book: {book_id}")
    return await repo.delete(book_id)


# =============================================================================
# Lending
# =============================================================================

@router.post(
    "/{book_id}/{user_id}/borrow",
    response_model=tuple[UserResponse, BookResponse],
    responses=LENDING_ERRORS,
)
async def borrow_book(
    book_id: str,
    user_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Lend a book to a user. Answers ``[user, book]``."""
    logger.info(f"Borrowing book {book_id} for user {user_id}")
    user, book = await repo.borrow(book_id, user_id)
    return [user, book]


@router.post(
    "/{book_id}/{user_id}/return",
    response_model=tuple[UserResponse, BookResponse],
    responses=LENDING_ERRORS,
)
async def return_book(
    book_id: str,
    user_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Take a lent book back. Answers ``[user, book]``."""
    logger.info(f"Returning book {book_id} from user {user_id}")
    user, book = await repo.return_book(book_id, user_id)
    return [user, book]
